import os

# Every test run uses a private in-memory database.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
