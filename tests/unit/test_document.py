import pytest

from justapply.core.document import (
    MAX_DOCUMENT_BYTES,
    AnnotatedDocument,
    annotate_resume,
    validate_document,
)
from justapply.errors import DocumentValidationError


def test_annotate_appends_commented_job_block() -> None:
    document = annotate_resume(
        "\\section{Experience}",
        "resume.tex",
        company="Acme",
        job_role="Engineer",
        description="Line one\nLine two",
    )
    assert document.name == "resume.tex"
    assert document.media_type == "application/x-tex"
    assert document.content.decode("utf-8") == (
        "\\section{Experience}\n\n"
        "% Job Details\n"
        "% Company: Acme\n"
        "% Role: Engineer\n"
        "% Description:\n"
        "% Line one\n"
        "% Line two"
    )


def test_valid_document_passes() -> None:
    validate_document(AnnotatedDocument(name="cv.tex", content=b"\\documentclass{article}"))


@pytest.mark.parametrize(
    ("document", "message"),
    [
        (AnnotatedDocument(name="resume.txt", content=b"hello"), "File must be a .tex file"),
        (
            AnnotatedDocument(name="resume.tex", content=b"a" * (6 * 1024 * 1024)),
            "File size must be less than 5MB",
        ),
        (AnnotatedDocument(name="resume.tex", content=b"   \n\t  \n"), "File appears to be empty"),
    ],
)
def test_invalid_documents_have_distinct_errors(document: AnnotatedDocument, message: str) -> None:
    with pytest.raises(DocumentValidationError) as exc_info:
        validate_document(document)
    assert exc_info.value.message == message


def test_size_limit_is_inclusive() -> None:
    validate_document(AnnotatedDocument(name="resume.tex", content=b"x" * MAX_DOCUMENT_BYTES))


def test_only_leading_chunk_is_checked_for_content() -> None:
    content = b" " * 2048 + b"\\end{document}"
    with pytest.raises(DocumentValidationError, match="empty"):
        validate_document(AnnotatedDocument(name="resume.tex", content=content))
