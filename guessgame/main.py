import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# --- .env support ---
load_dotenv()

from guessgame.config import settings
from guessgame.routers import game, health, ledger, players, rounds

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ------------------------------------------------------------------------------
# FastAPI
# ------------------------------------------------------------------------------
app = FastAPI(title="Verifiable Guess Game", version=settings.app_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------------------
# Include routers
# ------------------------------------------------------------------------------
app.include_router(health.router)
app.include_router(players.router)
app.include_router(game.router)
app.include_router(ledger.router)
app.include_router(rounds.router)
