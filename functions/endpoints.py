from config import get_settings
from firebase_functions import https_fn
from media.upload_to_mux import upload_to_mux as handle_upload_to_mux


@https_fn.on_request()
def upload_to_mux(req: https_fn.Request) -> https_fn.Response:
    """
    HTTPS function that registers a video with Mux and returns its stream URL.
    """
    return handle_upload_to_mux(req, get_settings())
