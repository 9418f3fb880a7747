# app/main.py

# ------------------------
# 환경 변수 로드
# ------------------------
from dotenv import load_dotenv
load_dotenv()

# ------------------------
# FastAPI, CORS 미들웨어 import
# ------------------------
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.logging_config import configure_logging
from app.routers import chat as chat_router
from app.routers import experiences as experiences_router

configure_logging()

# ------------------------
# 1) FastAPI 앱 생성
# ------------------------
app = FastAPI(title="Interview Prep API")

# ------------------------
# 2) CORS 미들웨어 추가
#    - 기본값은 전체 허용 (CORS_ORIGINS 로 제한)
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,  # 쿠키 안 쓰면 False
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------
# 3) 라우터 등록
# ------------------------
app.include_router(chat_router.router)
app.include_router(experiences_router.router)

# ------------------------
# 4) Root 엔드포인트 (health check)
# ------------------------
@app.get("/")
def root():
    return {"ok": True}
