# storybook/features/create_pdf/router.py
from fastapi import APIRouter
from fastapi.responses import Response

from .schemas import CreatePdfRequest
from .service import content_disposition, create_storybook

router = APIRouter(prefix="/api", tags=["storybook"])

# plain def: composition is CPU-bound, so it runs in the threadpool
@router.post(
    "/create-pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
def create_pdf_endpoint(req: CreatePdfRequest) -> Response:
    book = create_storybook(req)
    return Response(
        content=book.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(req.child_name)},
    )
