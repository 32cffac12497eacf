"""
Engine settings read from the environment.

Values come from the process environment, with a `.env` file at the project
root loaded first (python-dotenv), the same way the Supabase credentials are
loaded. Secrets are not part of these settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_SPECIALIST_NAME = "Nat"


@dataclass(frozen=True, slots=True)
class EngineSettings:
    specialist_name: str = DEFAULT_SPECIALIST_NAME
    leads_table: str = "leads"
    sales_persons_table: str = "sales_persons"
    appointments_table: str = "appointments"

    @classmethod
    def from_env(cls) -> "EngineSettings":
        return cls(
            specialist_name=os.getenv("LEAD_SPECIALIST_NAME", DEFAULT_SPECIALIST_NAME),
            leads_table=os.getenv("LEADS_TABLE", "leads"),
            sales_persons_table=os.getenv("SALES_PERSONS_TABLE", "sales_persons"),
            appointments_table=os.getenv("APPOINTMENTS_TABLE", "appointments"),
        )


__all__ = ["EngineSettings", "DEFAULT_SPECIALIST_NAME"]
