import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from reward_tiers.db import engine, Base, SessionLocal
from reward_tiers.errors import RewardTiersError

from reward_tiers.models.reward import Reward
from reward_tiers.models.customer import Customer
from reward_tiers.models.data_version import DataVersion

from reward_tiers.routes.rewards import router as rewards_router
from reward_tiers.routes.customers import router as customers_router
from reward_tiers.routes.admin import router as admin_router
from reward_tiers.services.upgrade_service import activate_brand


logger = logging.getLogger(__name__)

app = FastAPI(title="Reward Tiers")

# ─── CORS ─────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "https://localhost:3000",
        "http://127.0.0.1:3000",
        "https://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RewardTiersError)
def handle_reward_tiers_error(request: Request, exc: RewardTiersError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def configured_brands() -> list[str]:
    raw = os.getenv("REWARD_TIERS_BRANDS") or ""
    return [b.strip() for b in raw.split(",") if b.strip()]


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)

    for brand in configured_brands():
        db = SessionLocal()
        try:
            applied = activate_brand(db, brand)
            logger.info("brand activated", extra={"brand": brand, "applied_versions": applied})
        finally:
            db.close()


app.include_router(rewards_router)
app.include_router(customers_router)
app.include_router(admin_router)


@app.get("/")
def read_root():
    return {"message": "Reward Tiers is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8001, reload=True)
