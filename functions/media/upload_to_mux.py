import json
from typing import Any, Optional

import requests
from config import Settings
from firebase_functions import https_fn
from flask import Request
from models.constants import MUX_STREAM_URL_TEMPLATE, MuxMessages
from models.data_models import MuxUploadResponse
from models.pydantic_models import MuxAssetResponse, UploadToMuxRequest
from pydantic import ValidationError
from utils.logging_utils import get_logger


def _text_response(message: str, status: int) -> https_fn.Response:
    return https_fn.Response(message, status=status, mimetype="text/plain")


def _json_response(body: Any, status: int) -> https_fn.Response:
    return https_fn.Response(
        json.dumps(body), status=status, mimetype="application/json"
    )


def _failure_response(error: Any) -> https_fn.Response:
    return _json_response({"message": MuxMessages.UPLOAD_FAILED, "error": error}, 500)


def _upstream_error(error: requests.RequestException) -> Any:
    """
    Prefer the body Mux sent back over the exception text.

    Args:
        error: The exception raised by requests

    Returns:
        The decoded JSON error body, the raw body text, or the exception message
    """
    response: Optional[requests.Response] = error.response
    if response is not None and response.content:
        try:
            return response.json()
        except ValueError:
            return response.text
    return str(error)


def create_mux_asset(video_url: str, settings: Settings) -> Optional[str]:
    """
    Register a video with Mux and return the first playback ID of the new asset.

    Args:
        video_url: Publicly reachable URL of the source video
        settings: Settings holding the Mux credentials and endpoint

    Returns:
        The playback ID, or None if Mux answered without one

    Raises:
        requests.RequestException: The call failed or Mux returned an error status
        ValueError: The response body was not valid JSON or had an unexpected shape
    """
    response = requests.post(
        settings.mux_api_url,
        json={"input": video_url, "playback_policy": ["public"]},
        auth=(settings.mux_token_id, settings.mux_token_secret),
    )
    response.raise_for_status()

    asset = MuxAssetResponse.model_validate(response.json())
    return asset.first_playback_id()


def upload_to_mux(request: Request, settings: Settings) -> https_fn.Response:
    """
    Forward a video URL to Mux and answer with the HLS stream URL of the asset.

    Args:
        request: The Flask request, expected to be a POST with a JSON body
                 containing videoURL
        settings: Settings holding the Mux credentials

    Returns:
        A response carrying the stream URL on success.

    Raises nothing; failures are answered with:
        405: Method other than POST
        400: videoURL missing or empty
        500: Mux credentials not configured, Mux call failed or no playback ID
    """
    logger = get_logger(__name__)

    if request.method != "POST":
        logger.warning(f"Rejected {request.method} request to upload_to_mux")
        return _text_response(MuxMessages.METHOD_NOT_ALLOWED, 405)

    body = request.get_json(silent=True)
    try:
        upload_request = UploadToMuxRequest.model_validate(
            body if isinstance(body, dict) else {}
        )
    except ValidationError as e:
        logger.warning(f"Invalid upload_to_mux body: {e.errors()}")
        return _text_response(MuxMessages.MISSING_VIDEO_URL, 400)

    if not settings.has_mux_credentials:
        logger.error("MUX_TOKEN_ID or MUX_TOKEN_SECRET is not configured")
        return _text_response(MuxMessages.MISSING_CREDENTIALS, 500)

    logger.info(f"Creating Mux asset for {upload_request.videoURL}")
    try:
        playback_id = create_mux_asset(upload_request.videoURL, settings)
    except requests.RequestException as e:
        error = _upstream_error(e)
        logger.error(f"❌ Mux upload error: {error}")
        return _failure_response(error)
    except ValueError as e:
        logger.error(f"❌ Mux upload error: unreadable response: {str(e)}")
        return _failure_response(str(e))

    if not playback_id:
        logger.error("Mux response did not contain a playback ID")
        return _failure_response(MuxMessages.MISSING_PLAYBACK_ID)

    result = MuxUploadResponse(
        message=MuxMessages.UPLOAD_SUCCESSFUL,
        muxURL=MUX_STREAM_URL_TEMPLATE.format(playback_id=playback_id),
    )
    logger.info(f"Mux asset ready for streaming at {result.muxURL}")
    return _json_response(result.to_json(), 200)
