from dotenv import load_dotenv

# Pick up TWILIO_* and friends from a local .env before anything reads os.environ.
load_dotenv()
