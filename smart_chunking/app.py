from dataclasses import replace

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .config import ChunkingServiceConfig
from .exceptions import ChunkingError, ConfigurationError
from .database import ChunkDistributionStats, FileProcessingResult
from .models import ChunkRequest, ChunkResponse, RawDocument
from .service import ChunkingService
from .token_counter import word_count


def create_app(config: ChunkingServiceConfig | None = None) -> FastAPI:
    cfg = config or ChunkingServiceConfig.from_env()
    app = FastAPI(
        title="Chunking Service",
        version="1.0.0",
        description="Paragraph-aware chunking with image interleaving.",
    )

    @app.exception_handler(ConfigurationError)
    def configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/chunk", response_model=ChunkResponse)
    def chunk(request: ChunkRequest) -> ChunkResponse:
        service = ChunkingService(replace(cfg, options=request.options))
        document = RawDocument(
            text=request.text,
            file_name=request.file_name,
            file_type=request.file_type,
            word_count=word_count(request.text),
        )
        try:
            result = service.chunk(document, request.image_references)
            output_path = None
            if request.save:
                output_path = service.save(service.to_file_result(result, document))
        except ChunkingError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return ChunkResponse(
            document_id=result.document_id,
            total_chunks=result.total_chunks,
            total_tokens=result.stats.total_tokens,
            chunks=result.chunks,
            output_path=output_path,
        )

    @app.get("/documents/{document_id}", response_model=FileProcessingResult)
    def latest_result(document_id: str) -> FileProcessingResult:
        result = ChunkingService(cfg).latest(document_id)
        if result is None:
            raise HTTPException(status_code=404, detail=f"No saved chunks for {document_id}")
        return result

    @app.get("/documents/{document_id}/stats", response_model=ChunkDistributionStats)
    def latest_stats(document_id: str) -> ChunkDistributionStats:
        stats = ChunkingService(cfg).latest_stats(document_id)
        if stats is None:
            raise HTTPException(status_code=404, detail=f"No saved chunks for {document_id}")
        return stats

    return app
