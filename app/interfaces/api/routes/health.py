from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, str]:
    store = request.app.state.notification_store
    return {"status": "ok", "browser_permission": store.browser_permission}
