# src/calastro/api/app.py
from fastapi import FastAPI
from calastro.api.public import router as public_router

app = FastAPI(title="calastro public api")
app.include_router(public_router)
