"""
Context Routes

The GPT context endpoint. A chat client sends its free-text query as the
last path segment and receives plain text it can paste into a prompt:
rendered catalogue documents separated by ``---`` lines, cut off once the
token budget is used up.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from typing import Annotated

from .models import HTTPResultMessage
from ..context.assembler import ContextAssembler
from .dependencies import get_context_assembler

BASEPATH = "/api/v1"

router = APIRouter(prefix=BASEPATH, tags=["context"])


@router.get(
    "/{query:path}",
    response_class=PlainTextResponse,
    summary="gets GPT query context to query",
    operation_id="get-context-by-query",
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": HTTPResultMessage},
        status.HTTP_404_NOT_FOUND: {"model": HTTPResultMessage},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": HTTPResultMessage},
    },
)
async def chat_search(
    query: str,
    assembler: Annotated[ContextAssembler, Depends(get_context_assembler)],
) -> PlainTextResponse:
    """
    Based on a GPT chat query, similar documents are searched and returned
    as context.

    Parameters
    ----------
    query : str
        URL-decoded chat query.

    Returns
    -------
    PlainTextResponse
        The assembled context. Failures are handled by the registered
        ``ContextError`` handler and answered as ``HTTPResultMessage``.
    """
    result = await assembler.assemble(query)

    return PlainTextResponse(
        result.text,
        headers={
            "Content-Language": result.language,
            "X-Context-Tokens": str(result.tokens),
        },
    )
