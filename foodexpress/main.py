import logging
import math
import os
import uvicorn
from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlmodel import Session, select
from .config import FRONTEND_DIR, IS_PRODUCTION, PORT
from .delivery import estimate_delivery_minutes, eta_text
from .models import MenuItem, Order
from .database import get_session

logger = logging.getLogger(__name__)

app = FastAPI(title="FoodExpress")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

API_PREFIXES = ("/menu", "/order", "/delivery-time")


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

@app.exception_handler(404)
async def not_found(request: Request, exc: Exception):
    if request.url.path.startswith(API_PREFIXES):
        return JSONResponse({"error": "Not found"}, status_code=404)
    return JSONResponse({"error": getattr(exc, "detail", "Not Found")}, status_code=404)

@app.exception_handler(405)
async def method_not_allowed(request: Request, exc: StarletteHTTPException):
    if request.url.path.startswith(API_PREFIXES):
        return JSONResponse({"error": "Not found"}, status_code=404)
    return JSONResponse({"error": exc.detail}, status_code=405, headers=exc.headers)

@app.exception_handler(Exception)
async def server_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = {"error": "Internal Server Error"}
    if not IS_PRODUCTION: body["message"] = str(exc)
    return JSONResponse(body, status_code=500)


@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/menu")
def menu(session: Session = Depends(get_session)):
    items = session.exec(select(MenuItem).order_by(MenuItem.created_at.desc())).all()
    return {"items": [i.document() for i in items]}

@app.post("/order", status_code=201)
async def create_order(request: Request, session: Session = Depends(get_session)):
    try: body = await request.json()
    except ValueError: body = None
    if not isinstance(body, dict): body = {}

    food_name, total = body.get("foodName"), body.get("totalAmount")
    if not isinstance(food_name, str) or not food_name.strip():
        raise HTTPException(400, "Invalid or missing foodName")
    if isinstance(total, bool) or not isinstance(total, (int, float)) or not math.isfinite(total) or total < 0:
        raise HTTPException(400, "Invalid totalAmount")

    loc = body.get("userLocation") if isinstance(body.get("userLocation"), dict) else {}
    order = Order(
        food_name=food_name.strip(), total_amount=float(total),
        pincode=str(loc.get("pincode") or ""), city=str(loc.get("city") or ""), address=str(loc.get("address") or ""),
    )
    session.add(order); session.commit(); session.refresh(order)
    logger.info("Order %s received for %s", order.id, order.food_name)
    return {"order": order.document()}

@app.get("/delivery-time")
def delivery_time(location: str = "", pincode: str = "", city: str = ""):
    loc = (location or pincode or city).strip()
    if not loc: raise HTTPException(400, "Missing location (pincode or city)")
    minutes = estimate_delivery_minutes(loc)
    return {"location": loc, "etaMinutes": minutes, "etaText": eta_text(minutes)}


if os.path.isdir(FRONTEND_DIR):
    app.mount("/HTML", StaticFiles(directory=FRONTEND_DIR), name="frontend")

    @app.get("/", include_in_schema=False)
    def index(): return FileResponse(os.path.join(FRONTEND_DIR, "index.html"))


def run():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
