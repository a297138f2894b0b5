from contextlib import asynccontextmanager

from fastapi import FastAPI

from db import init_db
from routes import bills, categories, dashboard, forecast, goals, sync, transactions


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Budget Forecast", lifespan=lifespan)

app.include_router(dashboard.router)
app.include_router(forecast.router)
app.include_router(transactions.router)
app.include_router(goals.router)
app.include_router(bills.router)
app.include_router(categories.router)
app.include_router(sync.router)
