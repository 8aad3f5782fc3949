from __future__ import annotations

from dataclasses import dataclass
import logging

import httpx

from formsubmit.domain.contracts import HttpClientFactory
from formsubmit.domain.models import FileAttachment, SubmissionResult

COMPONENT_ID = "domain.submit.dispatch"

# Multipart field names expected by downstream consumers. Both data fields
# carry the same payload; consumers read one or the other.
DATA_FIELD = "data"
DATA_XML_FIELD = "dataXml"
ATTACHMENTS_FIELD = "attachments"

TEXT_CONTENT_TYPE = "text/plain; charset=UTF-8"
REQUEST_FAILED = "request failed"

MultipartFile = tuple[str | None, bytes, str]

logger = logging.getLogger("formsubmit")


def build_multipart_files(*, data: str, attachment: FileAttachment | None) -> list[tuple[str, MultipartFile]]:
    payload = data.encode("utf-8")
    files: list[tuple[str, MultipartFile]] = [
        (DATA_FIELD, (None, payload, TEXT_CONTENT_TYPE)),
        (DATA_XML_FIELD, (None, payload, TEXT_CONTENT_TYPE)),
    ]
    if attachment is not None:
        # Binary part keeps the UTF-8 charset flag so non-ASCII filenames survive.
        files.append(
            (
                ATTACHMENTS_FIELD,
                (attachment.file_name, attachment.content, f"{attachment.content_type}; charset=UTF-8"),
            )
        )
    return files


@dataclass(frozen=True)
class SubmissionDispatcher:
    client_factory: HttpClientFactory

    def dispatch(
        self,
        *,
        post_url: str | None,
        data: str,
        attachment: FileAttachment | None,
        form_path: str = "<form path is not set>",
    ) -> SubmissionResult:
        """POST the submission to the configured endpoint.

        A missing endpoint is a successful no-op. Only HTTP 200 counts as
        delivered; transport errors are logged and reported, never raised.
        """
        if post_url is None or not post_url.strip():
            logger.debug("post URL is not set, skipping REST call", extra={"form_path": form_path})
            return SubmissionResult(form_submission_complete=True)

        if attachment is None:
            logger.debug("no DoR attachment for submission", extra={"form_path": form_path})

        files = build_multipart_files(data=data, attachment=attachment)
        try:
            with self.client_factory.new_client() as client:
                response = client.post(post_url.strip(), files=files)
        except Exception:
            # Malformed endpoints raise httpx.InvalidURL or ValueError before any I/O.
            logger.exception(
                "failed to make REST call",
                extra={"form_path": form_path, "error_code": "transport_failed"},
            )
            return SubmissionResult(form_submission_complete=False, error=REQUEST_FAILED)

        if response.status_code == httpx.codes.OK:
            return SubmissionResult(
                form_submission_complete=True,
                status_code=response.status_code,
                attachment_included=attachment is not None,
            )

        logger.warning(
            "REST endpoint rejected submission with status %s",
            response.status_code,
            extra={"form_path": form_path, "error_code": "remote_rejected"},
        )
        return SubmissionResult(
            form_submission_complete=False,
            error=REQUEST_FAILED,
            status_code=response.status_code,
            attachment_included=attachment is not None,
        )
