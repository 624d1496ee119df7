"""
LLM-powered demo data generator for the Clinic Agenda.
STRATEGY: one batched request per record type, strict schema prompts,
robust parsing, and per-item pydantic validation (bad items are skipped).
"""

import os
import json
import logging
import re
import google.generativeai as genai
from typing import List, Tuple, Any, Type
from datetime import date
from pydantic import ValidationError, BaseModel

from models import AppointmentData, LastVisit, Patient

logger = logging.getLogger(__name__)


class DataGenerator:
    def __init__(self, api_key: str | None = None, model_name: str = "gemini-2.5-flash"):
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("GOOGLE_API_KEY not found. Please set it in environment.")

        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(model_name)
        self.total_cost = 0.0

    def _estimate_cost(self, prompt_tokens: int, response_tokens: int) -> float:
        return (prompt_tokens * 0.075 + response_tokens * 0.30) / 1_000_000

    def _robust_parse_json(self, raw_text: str) -> List[Any]:
        """
        Handles Markdown fences, stray prose around the array, and
        {"patients": [...]}-style wrapping.
        """
        if not raw_text: return []

        # 1. Clean Markdown Code Blocks
        clean_text = re.sub(r"```json\s*|\s*```", "", raw_text).strip()

        try:
            data = json.loads(clean_text)
        except json.JSONDecodeError:
            # Fallback: Try to regex extract the main list
            match = re.search(r'(\[.*\])', clean_text, re.DOTALL)
            if not match:
                return []
            try:
                data = json.loads(match.group(1))
            except json.JSONDecodeError:
                return []

        # 2. Normalize Data Shape
        if isinstance(data, list): return data
        if isinstance(data, dict):
            for key in ['patients', 'visits', 'appointments', 'result']:
                if key in data and isinstance(data[key], list):
                    return data[key]
            return [data]
        return []

    def _validate_items(self, data_list: List[Any], model_class: Type[BaseModel]) -> List[BaseModel]:
        valid_items = []
        for i, item in enumerate(data_list):
            try:
                valid_items.append(model_class(**item))
            except (ValidationError, TypeError) as e:
                logger.warning(f"Skipping invalid {model_class.__name__} item {i}: {e}")
        return valid_items

    def _fetch_big_batch(self, prompt: str, model_class: Type[BaseModel]) -> Tuple[List[Any], float]:
        """
        Executes a generation request with robust parsing.
        API failures are logged and yield an empty batch so the demo can fall back.
        """
        try:
            generation_config = genai.GenerationConfig(
                response_mime_type="application/json",
                max_output_tokens=16000,
                temperature=0.7
            )
            response = self.model.generate_content(prompt, generation_config=generation_config)
        except Exception as e:
            logger.error(f"Batch Generation Failed: {e}")
            return [], 0.0

        cost = 0.0
        usage = getattr(response, 'usage_metadata', None)
        if usage is not None:
            cost = self._estimate_cost(usage.prompt_token_count, usage.candidates_token_count)
        self.total_cost += cost

        return self._validate_items(self._robust_parse_json(response.text), model_class), cost

    def generate_patients(self, count: int = 15, locations: List[str] | None = None) -> Tuple[List[Patient], float]:
        locations = locations or ["Office", "Online", "Home visit"]
        prompt = f"""
        Generate {count} patients of a nutrition practice.
        OUTPUT: JSON Array.
        RULES:
        - "id": INTEGER, unique, starting at 1.
        - "phone": digits only, Brazilian format with country code (e.g. "5516987654321").
        - "location": one of {json.dumps(locations)}.
        FIELDS: id, name, phone, location, barter (bool).
        """
        logger.info(f"Generating {count} patients...")
        return self._fetch_big_batch(prompt, Patient)

    def generate_last_visits(self, patients: List[Patient], today: date | None = None) -> Tuple[List[LastVisit], float]:
        if today is None: today = date.today()
        ids = json.dumps([p.id for p in patients])
        prompt = f"""
        Generate the most recent visit for SOME of these patient ids: {ids}.
        Leave about 20% of patients without a visit (they are new).
        OUTPUT: JSON Array.
        RULES:
        - "date": "YYYY-MM-DD", between 1 and 200 days before {today}.
        - "kind": one of ["visit", "followup"].
        FIELDS: patient_id, date, kind.
        """
        return self._fetch_big_batch(prompt, LastVisit)

    def generate_appointments(
        self,
        patients: List[Patient],
        start_date: date | None = None,
        count: int = 10
    ) -> Tuple[List[AppointmentData], float]:
        if start_date is None: start_date = date.today()
        roster = json.dumps([{"id": p.id, "name": p.name, "location": p.location} for p in patients])
        prompt = f"""
        Generate {count} appointments over the two weeks starting {start_date}.
        PATIENTS (use their id, name and location verbatim): {roster}
        OUTPUT: JSON Array.
        STRICT SCHEMA RULES:
        - "date": "YYYY-MM-DD", Monday to Friday only.
        - "start_time": "HH:MM", on the hour, between 08:00 and 16:00, never 12:00.
        - "kind": one of ["visit", "followup", "other"]; "duration_minutes" is 45 for followup, else 60.
        - "status": one of ["scheduled", "confirmed"].
        - No two appointments may overlap on the same date.
        FIELDS: patient_id, patient_name, date, start_time, duration_minutes, kind, status,
                location, notes, notify_patient (bool), billable (bool), is_remote (bool).
        """
        logger.info(f"Generating {count} appointments...")
        return self._fetch_big_batch(prompt, AppointmentData)
