from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime
import logging
import os

import config
from database import Base, engine
import models  # noqa: F401  registers every table on Base.metadata
import routers.chart_of_accounts as chart_of_accounts
import routers.journal_entry as journal_entry
import routers.cashbook as cashbook
import routers.accounting as accounting
import routers.business_partners as business_partners
import routers.obligations as obligations
import routers.payments as payments


os.makedirs(config.LOG_DIR, exist_ok=True) # Create the log directory if it doesn't exist

# Create a unique log file name based on current date/time
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(config.LOG_DIR, f"app_{current_time_str}.log")

# Configure the root logger
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE,
    filemode='a'
)

# Also log to the console
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler)

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)


app = FastAPI(
    title="Ledger API",
    version="1.0.0",
    description="Double-entry ledger, cashbook and payment allocation",
)

# Split the comma separated origins, stripping any whitespace
allowed_origins = [origin.strip() for origin in config.CORS_ALLOWED_ORIGINS.split(',')]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chart_of_accounts.router)
app.include_router(journal_entry.router)
app.include_router(cashbook.router)
app.include_router(accounting.router)
app.include_router(business_partners.router)
app.include_router(obligations.router)
app.include_router(payments.router)

@app.get("/")
async def test_route():
    return {"message": "Ledger service is running"}
