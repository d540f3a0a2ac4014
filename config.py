# config.py
import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "basement_lab.db"),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 📋 Program catalog: local path or http(s) URL
    PROGRAM_SOURCE = os.environ.get(
        "PROGRAM_SOURCE",
        os.path.join(BASE_DIR, "data", "program.json"),
    )
    PROGRAM_FETCH_TIMEOUT = int(os.environ.get("PROGRAM_FETCH_TIMEOUT", "10"))
