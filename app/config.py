# app/config.py


from dotenv import load_dotenv
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # .env 먼저 읽기

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    # 환경 구분
    app_env: str = "local"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Supabase
    supabase_url: str | None = None              # SUPABASE_URL
    supabase_anon_key: str | None = None         # SUPABASE_ANON_KEY
    supabase_service_role_key: str | None = None # SUPABASE_SERVICE_ROLE_KEY
    supabase_jwt_secret: str | None = None       # SUPABASE_JWT_SECRET
    supabase_jwt_audience: str = "authenticated" # SUPABASE_JWT_AUDIENCE

    # 면접 후기 테이블 / 검색
    experiences_table: str = "interview_posts"
    chat_match_limit: int = 5
    search_limit: int = 10

    # 채팅 세션
    chat_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),  # 루트 .env 절대경로
        env_file_encoding="utf-8",
        extra="ignore",                   # 필요 없는 env 무시
    )

settings = Settings()

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("SUPABASE_URL:", settings.supabase_url)
    print("EXPERIENCES_TABLE:", settings.experiences_table)
