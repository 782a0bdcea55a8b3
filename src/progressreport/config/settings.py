from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    firebase_project_id: str = os.getenv("FIREBASE_PROJECT_ID", "")

    students_collection_id: str = os.getenv("STUDENTS_COLLECTION_ID", "students")
    config_collection_id: str = os.getenv("CONFIG_COLLECTION_ID", "config")
    grade_definitions_document_id: str = os.getenv("GRADE_DEFINITIONS_DOCUMENT_ID", "gradeDefinitions")

    # Appended to promotion remarks on the final report, e.g. "School reopens on April 1, 2026"
    reopening_notice: str = os.getenv("REOPENING_NOTICE", "")

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    cors_allowed_origins: tuple[str, ...] = _split_csv(
        os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )


settings = Settings()
