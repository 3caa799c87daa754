"""
API Namespaces - Organized endpoint groups
"""

from datetime import datetime
from typing import Any, Dict, Optional

from flask import current_app, redirect, request, send_file
from flask_restx import Namespace, Resource

from linkvault.api.health import get_health_status
from linkvault.api.v1.models import (
    content_summary,
    content_view,
    delete_request,
    error_response,
    health_response,
    text_upload_request,
    upload_response,
    view_request,
    view_response,
)
from linkvault.application.content_results import CreateContentRequest, UploadedFile
from linkvault.application.content_service import ContentService
from linkvault.config.content_config import ContentConfig
from linkvault.domain.content.value_objects import AccessKind
from linkvault.domain.errors import (
    AccessDeniedError,
    ContentExhaustedError,
    ContentExpiredError,
    ContentNotFoundError,
    DomainError,
    ErrorCategory,
    StorageUnavailableError,
    ValidationError,
    create_error_response,
)

TRUE_VALUES = ("1", "true", "yes", "on")


def _domain_error_response(error: DomainError):
    """Translate a domain exception into the JSON error body and HTTP status."""
    context = None
    if isinstance(error, ValidationError):
        status_code = 413 if error.category is ErrorCategory.FILE_TOO_LARGE else 400
    elif isinstance(error, ContentNotFoundError):
        status_code = 404
    elif isinstance(error, ContentExpiredError):
        status_code = 410
    elif isinstance(error, ContentExhaustedError):
        status_code = 410 if error.one_time else 403
    elif isinstance(error, AccessDeniedError):
        status_code = 403
        if error.password_required:
            context = {"requires_password": True}
    elif isinstance(error, StorageUnavailableError):
        status_code = 400
    else:
        current_app.logger.error(f"Unhandled domain error: {error}")
        return create_error_response(ErrorCategory.SYSTEM_ERROR, str(error), status_code=500)

    return create_error_response(error.category, str(error), context, status_code)


def _unexpected_error_response(where: str, error: Exception):
    current_app.logger.exception(f"Unexpected error in {where}: {error}")
    return create_error_response(
        ErrorCategory.SYSTEM_ERROR, f"Unexpected error: {error}", status_code=500
    )


def _content_service() -> ContentService:
    return current_app.container.resolve(ContentService)


def _content_config() -> ContentConfig:
    return current_app.container.resolve(ContentConfig)


def _owner_id() -> Optional[str]:
    owner = request.headers.get(_content_config().owner_header, "").strip()
    return owner or None


def _request_data() -> Dict[str, Any]:
    """Form fields for multipart uploads, the JSON body otherwise."""
    if request.files or request.form:
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


def _parse_int(data: Dict[str, Any], name: str) -> Optional[int]:
    value = data.get(name)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"'{name}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be an integer")


def _parse_bool(data: Dict[str, Any], name: str) -> bool:
    value = data.get(name)
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


def _parse_datetime(data: Dict[str, Any], name: str) -> Optional[datetime]:
    value = data.get(name)
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError("Invalid expiry date/time format")


def _build_create_request(data: Dict[str, Any]) -> CreateContentRequest:
    upload = None
    file_storage = request.files.get("file")
    if file_storage is not None and file_storage.filename:
        upload = UploadedFile(
            stream=file_storage.stream,
            filename=file_storage.filename,
            content_type=file_storage.mimetype or "application/octet-stream",
            size=file_storage.content_length or None,
        )

    text = data.get("text")
    if text is not None and not isinstance(text, str):
        raise ValidationError("'text' must be a string")

    return CreateContentRequest(
        text=text,
        file=upload,
        expires_at=_parse_datetime(data, "expires_at"),
        expires_in_minutes=_parse_int(data, "expires_in_minutes"),
        password=data.get("password"),
        max_views=_parse_int(data, "max_views"),
        one_time_view=_parse_bool(data, "one_time_view"),
        max_downloads=_parse_int(data, "max_downloads"),
        one_time_download=_parse_bool(data, "one_time_download"),
        owner_id=_owner_id(),
    )


# =============================================================================
# Content Namespace - Upload, preview, view and delete
# =============================================================================

content_ns = Namespace("content", description="Ephemeral content operations")


@content_ns.route("")
class ContentCollection(Resource):
    """Create content"""

    @content_ns.doc("create_content")
    @content_ns.expect(text_upload_request)
    @content_ns.response(201, "Created", upload_response)
    @content_ns.response(400, "Bad Request", error_response)
    @content_ns.response(413, "File Too Large", error_response)
    def post(self):
        """
        Share text or a file

        Send JSON with ``text``, or multipart form data with ``file`` (and the
        same options as form fields). The response carries the delete token,
        which is never shown again.
        """
        try:
            create_request = _build_create_request(_request_data())
            result = _content_service().create(create_request)
            current_app.logger.info(f"[CONTENT] Created {result.content_id}")
            return result.to_dict(_content_config().share_url(result.content_id)), 201
        except DomainError as e:
            return _domain_error_response(e)
        except Exception as e:
            return _unexpected_error_response("create content", e)


@content_ns.route("/mine")
class OwnerContent(Resource):
    """Content uploaded by the signed-in user"""

    @content_ns.doc("list_my_content")
    @content_ns.response(200, "Success", [content_summary])
    @content_ns.response(403, "Not Authorized", error_response)
    def get(self):
        """List the caller's live uploads, newest first"""
        owner_id = _owner_id()
        if owner_id is None:
            return create_error_response(
                ErrorCategory.NOT_AUTHORIZED, "Owner identity missing", status_code=403
            )
        try:
            return _content_service().list_by_owner(owner_id), 200
        except Exception as e:
            return _unexpected_error_response("list content", e)


@content_ns.route("/<string:content_id>")
@content_ns.param("content_id", "The content identifier")
class Content(Resource):
    """Preview and delete a content record"""

    @content_ns.doc("get_content", params={"password": "Password for protected content"})
    @content_ns.response(200, "Success", content_view)
    @content_ns.response(403, "Password Required or Limit Reached", error_response)
    @content_ns.response(404, "Not Found", error_response)
    @content_ns.response(410, "Expired", error_response)
    def get(self, content_id):
        """
        Preview content

        Does not count as a view. Use ``POST /content/<id>/views`` to record one.
        """
        try:
            return _content_service().fetch(content_id, request.args.get("password")), 200
        except DomainError as e:
            return _domain_error_response(e)
        except Exception as e:
            return _unexpected_error_response("get content", e)

    @content_ns.doc("delete_content")
    @content_ns.expect(delete_request)
    @content_ns.response(204, "Deleted")
    @content_ns.response(403, "Not Authorized", error_response)
    @content_ns.response(404, "Not Found", error_response)
    def delete(self, content_id):
        """
        Delete content

        Authorized by the delete token (body or ``delete_token`` query
        parameter) or by the owner identity header.
        """
        data = request.get_json(silent=True) or {}
        delete_token = data.get("delete_token") or request.args.get("delete_token")
        try:
            _content_service().delete(content_id, delete_token=delete_token, owner_id=_owner_id())
            current_app.logger.info(f"[CONTENT] Deleted {content_id}")
            return "", 204
        except DomainError as e:
            return _domain_error_response(e)
        except Exception as e:
            return _unexpected_error_response("delete content", e)


@content_ns.route("/<string:content_id>/views")
@content_ns.param("content_id", "The content identifier")
class ContentViews(Resource):
    """Record a view of text content"""

    @content_ns.doc("view_content")
    @content_ns.expect(view_request)
    @content_ns.response(200, "Success", view_response)
    @content_ns.response(403, "Password Required or Limit Reached", error_response)
    @content_ns.response(404, "Not Found", error_response)
    @content_ns.response(410, "Expired or Already Viewed", error_response)
    def post(self, content_id):
        """
        View text content

        Counts towards ``max_views``. One-time content is deleted by this call.
        """
        data = request.get_json(silent=True) or {}
        password = data.get("password") or request.args.get("password")
        try:
            result = _content_service().consume(content_id, AccessKind.VIEW, password)
            body = result.to_dict()
            body["text_content"] = result.text_content
            return body, 200
        except DomainError as e:
            return _domain_error_response(e)
        except Exception as e:
            return _unexpected_error_response("view content", e)


# =============================================================================
# Files Namespace - Downloads
# =============================================================================

files_ns = Namespace("files", description="File download operations")


@files_ns.route("/<string:content_id>")
@files_ns.param("content_id", "The content identifier")
class ContentFile(Resource):
    """Download a shared file"""

    @files_ns.doc("download_file", params={"password": "Password for protected content"})
    @files_ns.response(200, "File content")
    @files_ns.response(302, "Redirect to remote storage")
    @files_ns.response(403, "Password Required or Limit Reached", error_response)
    @files_ns.response(404, "Not Found", error_response)
    @files_ns.response(410, "Expired or Already Downloaded", error_response)
    def get(self, content_id):
        """
        Download a file

        Counts towards ``max_downloads``. Files kept in remote storage are
        served by redirecting to their public URL.
        """
        try:
            service = _content_service()
            result = service.consume(content_id, AccessKind.DOWNLOAD, request.args.get("password"))
            blob = result.blob
            if blob is None:
                return create_error_response(
                    ErrorCategory.CONTENT_NOT_FOUND, f"No file for {content_id}", status_code=404
                )

            if result.content is not None:
                stream = result.content
            elif result.deleted:
                return create_error_response(
                    ErrorCategory.CONTENT_NOT_FOUND,
                    f"File missing for one-time content {content_id}",
                    status_code=404,
                )
            elif blob.is_remote:
                current_app.logger.info(f"[FILES] Redirecting {content_id} to remote storage")
                return redirect(blob.location)
            else:
                stream = service.open_blob(blob)

            current_app.logger.info(f"[FILES] Serving {blob.filename} for {content_id}")
            return send_file(
                stream,
                as_attachment=True,
                download_name=blob.filename,
                mimetype=blob.content_type or "application/octet-stream",
            )
        except DomainError as e:
            return _domain_error_response(e)
        except Exception as e:
            return _unexpected_error_response("download file", e)


# =============================================================================
# Health Namespace
# =============================================================================

health_ns = Namespace("health", description="Service health")


@health_ns.route("")
class Health(Resource):
    @health_ns.doc("health")
    @health_ns.response(200, "Healthy", health_response)
    @health_ns.response(503, "Degraded", health_response)
    def get(self):
        """Redis, Celery and storage status"""
        return get_health_status(current_app)
