"""Document loading service for PDF processing."""
import logging
import os
import fitz  # PyMuPDF

from models.document import Document

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ('.txt', '.md')


class DocumentLoadError(Exception):
    """Raised when a document cannot be read or parsed."""

    code = "DOCUMENT_LOAD_ERROR"


class DocumentLoader:
    """Loads and extracts text from PDF (or plain text) manuals."""

    def load(self, filepath: str) -> Document:
        """
        Load a document from disk.

        Args:
            filepath: Path to a .pdf, .txt or .md file

        Returns:
            Document with the extracted text

        Raises:
            DocumentLoadError: If the file is missing or cannot be parsed
        """
        if not filepath or not os.path.isfile(filepath):
            raise DocumentLoadError(f"Soubor neexistuje: {filepath}")

        with open(filepath, 'rb') as f:
            data = f.read()
        return self.load_bytes(data, os.path.basename(filepath))

    def load_bytes(self, data: bytes, filename: str) -> Document:
        """
        Load a document from its raw bytes.

        Args:
            data: File content
            filename: Original file name, used to pick the parser

        Returns:
            Document with the extracted text
        """
        if filename.lower().endswith(TEXT_EXTENSIONS):
            try:
                text = data.decode('utf-8')
            except UnicodeDecodeError as e:
                raise DocumentLoadError(f"Failed to decode {filename}: {str(e)}") from e
            return Document(filename=filename, text=text, total_pages=1)

        return self._load_pdf(data, filename)

    def _load_pdf(self, data: bytes, filename: str) -> Document:
        """
        Extract the text of every page of a PDF.

        Pages are joined with newlines so page breaks fall on line boundaries.
        """
        try:
            pdf_document = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error(f"Failed to load PDF {filename}: {str(e)}")
            raise DocumentLoadError(f"Failed to load PDF {filename}: {str(e)}") from e

        try:
            page_texts = [page.get_text() for page in pdf_document]
            total_pages = len(pdf_document)
        except Exception as e:
            logger.error(f"Failed to extract text from PDF {filename}: {str(e)}")
            raise DocumentLoadError(f"Failed to extract text from PDF {filename}: {str(e)}") from e
        finally:
            pdf_document.close()

        return Document(
            filename=filename,
            text="\n".join(page_texts),
            total_pages=total_pages
        )
