from fastapi import APIRouter, Request

router = APIRouter(tags=["home"])


def error_payload(request: Request) -> dict:
    return {
        "status": "error",
        "message": "An error occurred while processing your request.",
        "request_id": getattr(request.state, "request_id", None),
    }


@router.get("/Home/Error")
def error(request: Request):
    return error_payload(request)
