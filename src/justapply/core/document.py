from __future__ import annotations

from dataclasses import dataclass

from justapply.errors import DocumentValidationError

TEX_MEDIA_TYPE = "application/x-tex"
TEX_EXTENSION = ".tex"
MAX_DOCUMENT_BYTES = 5 * 1024 * 1024
LEADING_CHUNK_BYTES = 1024


@dataclass(frozen=True, slots=True)
class AnnotatedDocument:
    name: str
    content: bytes
    media_type: str = TEX_MEDIA_TYPE

    @property
    def size(self) -> int:
        return len(self.content)


def job_details_block(company: str, job_role: str, description: str) -> str:
    commented = "\n".join(f"% {line}" for line in description.split("\n"))
    return (
        "\n\n% Job Details\n"
        f"% Company: {company}\n"
        f"% Role: {job_role}\n"
        "% Description:\n"
        f"{commented}"
    )


def annotate_resume(
    resume_content: str,
    resume_name: str,
    *,
    company: str,
    job_role: str,
    description: str,
) -> AnnotatedDocument:
    """Append the job details as a LaTeX comment block to the stored resume."""
    text = resume_content + job_details_block(company, job_role, description)
    return AnnotatedDocument(name=resume_name, content=text.encode("utf-8"))


def validate_document(document: AnnotatedDocument, max_bytes: int = MAX_DOCUMENT_BYTES) -> None:
    if not document.name.endswith(TEX_EXTENSION):
        raise DocumentValidationError("File must be a .tex file")

    if document.size > max_bytes:
        raise DocumentValidationError("File size must be less than 5MB")

    leading = document.content[:LEADING_CHUNK_BYTES].decode("utf-8", errors="replace")
    if not leading.strip():
        raise DocumentValidationError("File appears to be empty")
