from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from shortlink_app.dependencies import get_link_service, get_queue
from shortlink_app.queue.models import LinkAccessEvent
from shortlink_app.queue.strategies import AccessEventQueue
from shortlink_app.services.link_service import LinkService

router = APIRouter(tags=["redirect"])


@router.get("/{key}")
async def redirect_to_link(
    key: str,
    link_service: LinkService = Depends(get_link_service),
    queue: AccessEventQueue = Depends(get_queue)
):
    """
    Redirect to the stored link.

    Flow:
    1. Look up the link under the store's read lock
    2. Push an access event to the queue (no lock, never fails the request)
    3. Redirect immediately

    Usage counters are updated later by the merge worker, so the redirect
    never waits on the write lock.
    """
    link = await link_service.resolve(key)

    if link is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )

    # A dropped event only loses one usage count
    queue.push(LinkAccessEvent(alias=key))

    return RedirectResponse(url=link, status_code=status.HTTP_302_FOUND)
