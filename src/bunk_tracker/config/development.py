import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# 0/1 = predict subjects one by one; >1 = thread pool size for bulk predictions
PREDICTION_MAX_WORKERS = int(os.getenv("PREDICTION_MAX_WORKERS", "0"))
