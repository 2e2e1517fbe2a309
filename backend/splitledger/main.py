"""FastAPI app entrypoint."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from splitledger.config import ALLOWED_ORIGINS, LOG_LEVEL
from splitledger.database import Base, engine
from splitledger.errors import LedgerError
from splitledger.routers import analytics, expenses, recurring, settlements

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="SplitLedger API",
    description="Record shared expenses, see who owes whom and how the money was spent.",
    version="1.0.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc), "error": type(exc).__name__})


app.include_router(expenses.router, prefix="/api")
app.include_router(settlements.router, prefix="/api")
app.include_router(analytics.router, prefix="/api")
app.include_router(recurring.router, prefix="/api")


@app.get("/")
def root():
    return {"message": "SplitLedger API", "docs": "/docs"}
