from fastapi import APIRouter, HTTPException, Request, status

from scanner.api.dependencies import SessionControllerDep
from scanner.core.rate_limit import limiter, session_write_limit
from scanner.domain.models import ManualCodeSubmit, ScanResultSubmit, SessionView
from scanner.domain.ports import InvalidTransitionError
from scanner.services.presentation import render_session

router = APIRouter(prefix="/session", tags=["Session"])


@router.get("", response_model=SessionView)
async def get_session(controller: SessionControllerDep) -> SessionView:
    """
    Aktueller Zustand der Scan-Session des Operators (Polling-Vertrag).
    """
    return render_session(controller.snapshot)


@router.post("/manual", response_model=SessionView)
@limiter.limit(session_write_limit)
async def submit_manual_code(
    request: Request,
    controller: SessionControllerDep,
    payload: ManualCodeSubmit,
) -> SessionView:
    """
    Manuell eingegebener Code. Eine leere Eingabe führt zum Error-Zustand,
    nicht zu einem HTTP-Fehler.
    """
    return render_session(await controller.submit_manual(payload.code))


@router.post("/scan", response_model=SessionView)
@limiter.limit(session_write_limit)
async def submit_scan_result(
    request: Request,
    controller: SessionControllerDep,
    payload: ScanResultSubmit,
) -> SessionView:
    """
    Ergebnis des Kamera-Scans; `contents: null` bedeutet Abbruch und lässt
    den Zustand unverändert.
    """
    return render_session(await controller.accept_scan_result(payload.contents))


@router.post("/dismiss", response_model=SessionView)
@limiter.limit(session_write_limit)
async def dismiss_session(request: Request, controller: SessionControllerDep) -> SessionView:
    try:
        return render_session(await controller.dismiss())
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/error/acknowledge", response_model=SessionView)
async def acknowledge_error(controller: SessionControllerDep) -> SessionView:
    """Schließt den Fehlerdialog; der vorherige Zustand ist wieder aktiv."""
    try:
        return render_session(controller.acknowledge_error())
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
