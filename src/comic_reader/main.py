"""Main entry point for the comic reader application."""

import argparse
import sys
from pathlib import Path

from PySide6.QtPdf import QPdfDocument
from PySide6.QtWidgets import QApplication, QMessageBox

from comic_reader.coordinators import ReaderSession
from comic_reader.core import Document
from comic_reader.io import ComicApiClient
from comic_reader.services import SettingsManager, ThreadPoolRequestRunner
from comic_reader.ui import ReaderWindow
from comic_reader.utils.logging import get_logger, set_level

LOG = get_logger("comic_reader.main")


def parse_args(argv):
    parser = argparse.ArgumentParser(prog="comic-reader", description="Read a comic and sync progress and bookmarks.")
    parser.add_argument("pdf", type=Path, help="Path to the comic PDF")
    parser.add_argument("--slug", required=True, help="Comic slug on the platform")
    parser.add_argument("--title", help="Window title (defaults to the file name)")
    parser.add_argument("--page", type=int, default=1, help="Page to open on (1-indexed)")
    parser.add_argument("--log-level", help="Override COMIC_READER_LOG_LEVEL (DEBUG, INFO, WARNING, ...)")
    return parser.parse_args(argv)


def main(argv=None):
    """
    Bootstrap the application following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.
    """
    args = parse_args(sys.argv[1:] if argv is None else argv)
    if args.log_level:
        set_level(args.log_level)

    # 1. Initialize Application
    app = QApplication(sys.argv[:1])
    app.setApplicationName("Comic Reader")
    app.setOrganizationName("ComicReader")

    # 2. Load configuration
    settings_manager = SettingsManager()
    connection = settings_manager.connection_settings()
    reader_settings = settings_manager.reader_settings()

    # 3. Open the document
    pdf_document = QPdfDocument(app)
    error = pdf_document.load(str(args.pdf))
    if error != QPdfDocument.Error.None_ or pdf_document.pageCount() <= 0:
        LOG.error("Could not open %s: %s", args.pdf, error)
        QMessageBox.critical(None, "Comic Load Error", f"Failed to open comic:\n{args.pdf}")
        return 1

    document = Document(
        title=args.title or args.pdf.stem,
        slug=args.slug,
        total_pages=pdf_document.pageCount(),
        file_path=args.pdf,
    )

    # 4. Initialize Infrastructure
    api_client = ComicApiClient(
        connection.base_url,
        csrf_token=connection.csrf_token,
        timeout=connection.request_timeout,
    )
    if connection.session_cookie:
        api_client.set_session_cookie(*connection.session_cookie)
    runner = ThreadPoolRequestRunner()

    # 5. Instantiate Coordinator (Dependency Injection)
    session = ReaderSession(
        document,
        api_client,
        runner,
        settings=reader_settings,
        initial_page=args.page,
        progress_debounce_ms=settings_manager.get_progress_debounce_ms(),
        idle_timeout_ms=settings_manager.get_idle_timeout_ms(),
    )

    # 6. Construct UI and start event loop
    window = ReaderWindow(session, pdf_document)
    session.mount()
    window.show()

    exit_code = app.exec()

    # Let the final progress flush reach the server
    session.close()
    if not runner.wait_for_done(3000):
        LOG.warning("Pending requests did not finish before exit")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
