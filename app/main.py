import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.db import engine, Base
from app.settings import CORS_ORIGINS, LOG_LEVEL

from app.models.user import User
from app.models.reward import Reward
from app.models.redemption import Redemption
from app.models.award_event import AwardEvent
from app.models.notification import Notification
from app.models.analytics_rollup import AnalyticsRollup
from app.models.collection import Collection
from app.models.report import Report
from app.models.schedule import Schedule

from app.routes.rewards import router as rewards_router
from app.routes.wallet import router as wallet_router
from app.routes.collections import router as collections_router
from app.routes.reports import router as reports_router
from app.routes.notifications import router as notifications_router
from app.routes.analytics import router as analytics_router
from app.routes.schedule import router as schedule_router
from app.routes.dashboard import router as dashboard_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Waste Rewards Ledger")

# ─── CORS ─────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)


app.include_router(rewards_router)
app.include_router(wallet_router)
app.include_router(collections_router)
app.include_router(reports_router)
app.include_router(notifications_router)
app.include_router(analytics_router)
app.include_router(schedule_router)
app.include_router(dashboard_router)


@app.get("/")
def read_root():
    return {"message": "Waste Rewards Ledger is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8001, reload=True)
