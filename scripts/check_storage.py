"""Check that the meeting store and the S3 bucket are reachable with the current .env."""
import sys
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError

root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(root))

from backend.config import get_settings  # noqa: E402
from backend.services.repository import MeetingRepository  # noqa: E402
from backend.utils.auth_aws import aws_client  # noqa: E402

settings = get_settings()
failed = False

repository = MeetingRepository(settings.meetings_store_path)
try:
    count = len(repository.list_meetings())
    print(f"OK   meeting store {repository.storage_path} ({count} meetings)")
except (OSError, ValueError) as exc:
    print(f"FAIL meeting store {repository.storage_path}: {exc}")
    failed = True

try:
    aws_client("s3").head_bucket(Bucket=settings.s3_bucket_name)
    print(f"OK   s3 bucket {settings.s3_bucket_name}")
except (BotoCoreError, ClientError) as exc:
    print(f"FAIL s3 bucket {settings.s3_bucket_name}: {exc}")
    print("     uploads will fall back to backend/data/s3")
    failed = True

if not settings.groq_api_key:
    print("FAIL GROQ_API_KEY is missing")
    failed = True

sys.exit(1 if failed else 0)
