"""FastAPI service exposing recognition and unknown-input diagnostics."""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from life_parser.config import settings
from life_parser.entities.types import entity_to_dict
from life_parser.logging import get_logger
from life_parser.session import ParserSession

logger = get_logger(__name__)

VERSION = "0.1.0"


class ContextPayload(BaseModel):
    locations: Dict[str, Dict[str, Any]] = {}
    characters: Optional[Dict[str, Dict[str, Any]]] = None


class RecognizeRequest(BaseModel):
    input: str
    context: Optional[ContextPayload] = None


class RecognizeResponse(BaseModel):
    intent: str
    confidence: float
    entities: Dict[str, Dict[str, Any]]
    command: Dict[str, Any]
    timestamp: float


class IntentPayload(BaseModel):
    keywords: List[str]
    patterns: List[str] = []
    slots: List[str] = []
    priority: Optional[int] = None


class RegisterIntentRequest(IntentPayload):
    name: str


class UnknownInputsResponse(BaseModel):
    count: int
    capacity: int
    inputs: List[str]


class HealthResponse(BaseModel):
    status: str
    version: str
    components: Dict[str, str]


def _session(app: FastAPI) -> ParserSession:
    return app.state.session


def _configure_health_endpoint(app: FastAPI) -> None:
    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        session = _session(app)
        return HealthResponse(
            status="healthy",
            version=VERSION,
            components={
                "intents": str(len(session.registry)),
                "unknown_inputs": str(len(session.unknown_log)),
                "log_level": settings.log_level,
            },
        )


def _configure_recognize_endpoint(app: FastAPI) -> None:
    @app.post("/recognize", response_model=RecognizeResponse)
    async def recognize(request: RecognizeRequest) -> RecognizeResponse:
        session = _session(app)
        # Without a context the session's own content applies
        context = request.context.model_dump() if request.context is not None else None
        result = session.recognize(request.input, context)
        command = session.normalize(result, context)
        logger.debug(
            f"Recognized {request.input!r} as {result.intent} ({result.confidence:.2f})"
        )
        return RecognizeResponse(
            intent=result.intent,
            confidence=result.confidence,
            entities={k: entity_to_dict(v) for k, v in result.entities.items()},
            command=command.to_dict(),
            timestamp=result.timestamp,
        )


def _configure_intent_endpoints(app: FastAPI) -> None:
    @app.get("/intents")
    async def list_intents() -> Dict[str, Dict[str, Any]]:
        return {
            name: {
                "keywords": definition.keywords,
                "patterns": definition.patterns,
                "slots": definition.slots,
                "priority": definition.priority,
            }
            for name, definition in _session(app).get_intents().items()
        }

    @app.post("/intents", status_code=201)
    async def register_intent(request: RegisterIntentRequest) -> Dict[str, Any]:
        payload = request.model_dump(exclude={"name"})
        try:
            stored = _session(app).register_intent(request.name, payload)
        except ValueError as e:
            logger.warning(f"Rejected intent {request.name!r}: {e}")
            raise HTTPException(status_code=422, detail=str(e)) from e
        return {"name": request.name.strip().lower(), "priority": stored.priority}


def _configure_unknown_endpoints(app: FastAPI) -> None:
    @app.get("/unknown", response_model=UnknownInputsResponse)
    async def unknown_inputs() -> UnknownInputsResponse:
        session = _session(app)
        inputs = session.get_unknown_inputs()
        return UnknownInputsResponse(
            count=len(inputs), capacity=session.unknown_log.capacity, inputs=inputs
        )

    @app.delete("/unknown", status_code=204)
    async def clear_unknown_inputs() -> None:
        _session(app).clear_unknown_inputs()


def create_app(session: Optional[ParserSession] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        session: Parser session to serve; a fresh one is created when omitted

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Life Parser API",
        description="Free-text command interpretation for a turn-based simulation",
        version=VERSION,
    )
    app.state.session = session or ParserSession()

    _configure_health_endpoint(app)
    _configure_recognize_endpoint(app)
    _configure_intent_endpoints(app)
    _configure_unknown_endpoints(app)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("life_parser.api.main:app", host="0.0.0.0", port=8000, reload=True)
