from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

import pos_backend.infra.woocommerce_client as woocommerce_client
from pos_backend.errors import PosError
from pos_backend.state import PosState, get_pos_state
from pos_backend.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/woocommerce")
async def health_woocommerce(request: Request, state: PosState = Depends(get_pos_state)):
    """Vérifie la joignabilité de l'API catalogue (une page de catégories) et résume l'état local."""
    client = woocommerce_client.get_woocommerce()
    info = {
        "api_url": client.base_url,
        "connect_ok": False,
        "error": None,
        "catalog": {
            "products": len(state.catalog.products),
            "loaded_at": state.catalog.loaded_at.isoformat() if state.catalog.loaded_at else None,
            "last_error": state.catalog.last_error,
        },
        "rate_limit": rate_limit_health_info(request),
    }
    try:
        await client.get_json("/products/categories", params={"per_page": 1})
        info["connect_ok"] = True
    except PosError as e:
        info["error"] = e.message
    return JSONResponse(info)
