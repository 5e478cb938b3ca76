from __future__ import annotations

import asyncio
from typing import Iterator

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from kafkagate import __version__
from kafkagate.broker import BrokerError, BrokerRecord, BrokerTransport, create_broker
from kafkagate.config import Settings, load_settings
from kafkagate.dispatch import DispatchError, check_topic, dispatch
from kafkagate.utils.logger_util import get_logger

logger = get_logger(__name__)

settings: Settings = load_settings()


def _build_broker(s: Settings) -> BrokerTransport:
    if s.broker_adapter.strip().lower() == "kafka":
        return create_broker(
            "kafka",
            brokers=s.brokers,
            publish_timeout_sec=s.publish_timeout_sec,
            consumer_timeout_ms=s.consumer_timeout_ms,
            fetch_min_bytes=s.fetch_min_bytes,
            fetch_max_bytes=s.fetch_max_bytes,
        )
    return create_broker(s.broker_adapter)


broker: BrokerTransport = _build_broker(settings)

app = FastAPI(title="kafkagate", version=__version__)


def get_broker() -> BrokerTransport:
    return broker


@app.exception_handler(DispatchError)
async def dispatch_error_handler(request: Request, exc: DispatchError):
    logger.error("bad request %s %s: %s (%s)", request.method, request.url.path, exc.kind, exc.detail)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(BrokerError)
async def broker_error_handler(request: Request, exc: BrokerError):
    logger.error("broker failure %s %s: %s (%s)", request.method, request.url.path, exc.kind, exc.detail)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/create/{topic}")
async def create_topic(topic: str, transport: BrokerTransport = Depends(get_broker)):
    topic = check_topic(topic)
    await asyncio.to_thread(
        transport.create_topic, topic, settings.num_partitions, settings.replication_factor
    )
    return PlainTextResponse("Topic created successfully", status_code=201)


@app.post("/publish/{topic}")
async def publish_message(topic: str, request: Request, transport: BrokerTransport = Depends(get_broker)):
    topic = check_topic(topic)
    raw = await request.body()
    message = dispatch(raw)
    await asyncio.to_thread(transport.publish, topic, message.value, None, message.headers)
    logger.info("published %s to %s (%d bytes)", message.type_id, topic, len(message.value))
    return PlainTextResponse("Message created successfully", status_code=201)


@app.get("/topics")
async def list_topics(transport: BrokerTransport = Depends(get_broker)):
    topics = await asyncio.to_thread(transport.list_topics)
    return PlainTextResponse("Topics: " + ", ".join(topics), status_code=200)


def _format_record(record: BrokerRecord) -> str:
    key = (record.key or b"").decode("utf-8", errors="replace")
    value = (record.value or b"").decode("utf-8", errors="replace")
    return f"message at offset {record.offset}: {key} = {value}\n"


def _stream_lines(records: Iterator[BrokerRecord]) -> Iterator[str]:
    """Format records as text lines; the reader is closed however the stream ends."""
    try:
        for record in records:
            yield _format_record(record)
    finally:
        close = getattr(records, "close", None)
        if close is not None:
            close()


@app.get("/messages/{topic}")
async def list_messages(topic: str, transport: BrokerTransport = Depends(get_broker)):
    topic = check_topic(topic)
    records = await asyncio.to_thread(transport.read_messages, topic)
    return StreamingResponse(_stream_lines(records), media_type="text/plain")


def run() -> None:
    uvicorn.run("kafkagate.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
