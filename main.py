import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from routers import admin, catalog, estimate
from services.data_loader import ReferenceDataError

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Andaman Trip Cost Estimator",
    description="Live cost breakdown for island, location, activity, cab, ferry and hotel selections",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"]
)

app.include_router(catalog.router)
app.include_router(estimate.router)
app.include_router(admin.router)


@app.exception_handler(ReferenceDataError)
async def reference_data_error(request: Request, exc: ReferenceDataError):
    return JSONResponse(status_code=503, content={"detail": f"Reference data unavailable: {exc}"})


@app.get("/")
def root():
    return {
        "status":  "ok",
        "message": "Trip cost estimator API is running",
        "docs":    "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
