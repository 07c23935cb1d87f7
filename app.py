from __future__ import annotations
import hmac
import logging
import os
from dataclasses import asdict
from typing import Any, Dict, Optional

import dotenv
dotenv.load_dotenv()

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from veribridge.cleaner import clean_address
from veribridge.config import load_config
from veribridge.models import AddressComponents
from veribridge.normalizer import format_address, validate_address
from veribridge.options import generate_standard_address_format
from veribridge.pipeline import AddressAuditPipeline
from veribridge.preflight import generate_verification_report, get_verification_badge

cfg = load_config()
logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("veribridge.app")

pipeline = AddressAuditPipeline(cfg)

app = FastAPI(title="VeriBridge Address Service")


class ComponentsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    building: Optional[str] = None
    street: Optional[str] = None
    area: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    country: Optional[str] = Field(default=None, alias="countryName")
    jurisdiction: Optional[str] = None

    def components(self) -> AddressComponents:
        return AddressComponents.from_mapping(self.model_dump(exclude={"jurisdiction"}))


class ValidateRequest(BaseModel):
    address: str = ""


class CleanAddressRequest(BaseModel):
    raw_string: Optional[str] = None


class PreflightRequest(BaseModel):
    address: str
    ocr_text: Optional[str] = None
    user_data: Optional[Dict[str, Any]] = None


def require_api_key(x_api_key: Optional[str] = Header(default=None)) -> Optional[str]:
    if not cfg.api_keys:
        return None
    if not x_api_key:
        raise HTTPException(status_code=401, detail="Missing API key: provide it in the x-api-key header")
    if not any(hmac.compare_digest(x_api_key.encode(), k.encode()) for k in cfg.api_keys):
        raise HTTPException(status_code=401, detail="Invalid API key")
    return x_api_key


def _jurisdiction_or_404(code: Optional[str]):
    j = pipeline.jurisdiction(code)
    if not j.supports_issue_analysis:
        raise HTTPException(status_code=404, detail=f"No location data for jurisdiction {j.code}")
    return j


@app.get("/health")
def health():
    return {"status": "ok", "default_jurisdiction": cfg.default_jurisdiction}


@app.post("/format")
def format_components(payload: ComponentsRequest):
    comps = payload.components()
    return {
        "formatted": format_address(comps),
        "standard": asdict(generate_standard_address_format(comps)),
    }


@app.post("/validate")
def validate(payload: ValidateRequest):
    return asdict(validate_address(payload.address))


@app.post("/analyze")
def analyze(payload: ComponentsRequest):
    j = _jurisdiction_or_404(payload.jurisdiction)
    issues = j.analyze(payload.components())
    return {"jurisdiction": j.code, "issues": [asdict(i) for i in issues]}


@app.post("/options")
def options(payload: ComponentsRequest):
    j = _jurisdiction_or_404(payload.jurisdiction)
    return asdict(j.alternate_options(payload.components()))


@app.post("/audit")
def audit(payload: ComponentsRequest):
    return asdict(pipeline.audit(payload.components(), payload.jurisdiction))


@app.post("/preflight")
def preflight(payload: PreflightRequest):
    report = generate_verification_report(payload.address, payload.ocr_text, payload.user_data)
    out = asdict(report)
    out["badge"] = asdict(get_verification_badge(report.overall_score))
    return out


@app.post("/api/v1/clean-address")
def clean_address_api(payload: CleanAddressRequest, api_key: Optional[str] = Depends(require_api_key)):
    if not payload.raw_string:
        raise HTTPException(status_code=400, detail="Missing required field: raw_string")
    try:
        result = clean_address(payload.raw_string)
    except ValueError as exc:
        logger.warning("Address cleaning failed: %s", exc)
        raise HTTPException(status_code=400, detail=f"Address cleaning failed: {exc}")
    logger.info("Address API used (key %s): %r", (api_key or "-")[:12], payload.raw_string)
    return {
        "success": True,
        "input": payload.raw_string,
        "output": {**result.formatted, "complete": result.complete},
        "metadata": {"components": result.components, "confidence": result.confidence},
    }


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8008"))
    uvicorn.run(app, host=host, port=port)
