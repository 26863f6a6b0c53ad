import logging
from fastapi import FastAPI
from splitchat.core.config import settings
from splitchat.api.v1.routes.split_bills import router as split_bill_router
from splitchat.api.v1.routes.commands import router as command_router
from splitchat.api.v1.routes.expense import router as expense_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(title="SplitChat Backend")

@app.get("/")
async def root():
    return {"message": "SplitChat Backend is live"}

app.include_router(split_bill_router, prefix="/api/v1/split-bills")
app.include_router(command_router, prefix="/api/v1/commands")
app.include_router(expense_router, prefix="/api/v1/expense")
