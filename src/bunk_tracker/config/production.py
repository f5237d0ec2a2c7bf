import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PREDICTION_MAX_WORKERS = int(os.getenv("PREDICTION_MAX_WORKERS", "4"))
