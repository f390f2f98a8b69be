"""
Flask web application serving IIIF manifests for Europeana records.
Fetches the record from the Record API, derives the manifest and returns it as
IIIF Presentation v2 or v3 JSON-LD.
"""

from flask import Flask, request, Response, jsonify
from flask_cors import CORS
from exceptions import (
    InvalidRequestError,
    ManifestError,
    SerializationError,
)
from clients import FullTextClient, RecordApiClient
from export import manifest_to_jsonld
from fulltext import enrich
from mapping import record_to_manifest
from mediatypes import MediaTypes
from models import IiifVersion
from record import get_timestamp_update
from settings import ManifestSettings
import hashlib
import json
import logging
import os

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

# Initialize Flask app
app = Flask(__name__)

# CORS

CORS(app, expose_headers=["ETag", "Last-Modified"])

settings = ManifestSettings.from_env()
settings.log_settings()
media_types = MediaTypes.from_xml(settings.media_categories_file)
record_client = RecordApiClient(settings)
fulltext_client = FullTextClient(settings)


def parse_version(raw) -> IiifVersion:
    """IIIF version from the format parameter, version 2 if not specified."""
    if raw is None or raw == "":
        return IiifVersion.V2
    try:
        return IiifVersion(raw.strip())
    except ValueError:
        raise InvalidRequestError(f"Unsupported IIIF version '{raw}', use 2 or 3") from None


def parse_bool(raw, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() not in ("false", "0", "no")


def etag_for(timestamp, version: IiifVersion) -> str:
    data = f"{timestamp.isoformat()}-{version.value}-{APP_VERSION}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


@app.errorhandler(ManifestError)
def handle_manifest_error(error: ManifestError):
    if error.status_code >= 500:
        logger.error("Error generating manifest: %s", error.message)
    else:
        logger.info("Request failed: %s", error.message)
    response = jsonify(error.to_dict())
    response.status_code = error.status_code
    return response


@app.route("/")
def index():
    """Short description of the service."""
    return jsonify(
        {
            "name": "IIIF manifest service",
            "version": APP_VERSION,
            "manifest": "/presentation/<collection_id>/<record_id>/manifest?wskey=<key>&format=<2|3>",
        }
    )


@app.route("/presentation/<collection_id>/<record_id>/manifest")
def manifest(collection_id, record_id):
    wskey = request.args.get("wskey")
    if not wskey:
        raise InvalidRequestError("The wskey parameter is required")
    version = parse_version(request.args.get("format"))
    add_fulltext = parse_bool(request.args.get("fullText"), True)
    record_api = request.args.get("recordApi")
    fulltext_api = request.args.get("fullTextApi")

    record_id = f"/{collection_id}/{record_id}"
    record = record_client.fetch_record(record_id, wskey, record_api)

    data = record_to_manifest(record, settings, media_types)
    if add_fulltext:
        enrich(
            data,
            lambda page_nr: fulltext_client.probe(data.europeana_id, page_nr, fulltext_api),
            lambda europeana_id, page_nr: settings.fulltext_url(
                europeana_id, page_nr, fulltext_api
            ),
        )

    try:
        body = json.dumps(manifest_to_jsonld(data, version, settings), ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Error serializing data: {e}", cause=e) from e

    response = Response(body, mimetype="application/ld+json")
    timestamp = get_timestamp_update(record)
    if timestamp is not None:
        response.set_etag(etag_for(timestamp, version))
        response.last_modified = timestamp
    return response.make_conditional(request)


if __name__ == "__main__":
    app.run(
        debug=os.environ.get("FLASK_DEBUG", "false").lower() == "true",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "5000")),
    )
