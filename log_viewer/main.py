import sys
import signal
import logging
import argparse

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import qInstallMessageHandler, QtMsgType

from .config import ORGANIZATION, APPLICATION
from .ui import MainWindow

logger = logging.getLogger("log_viewer")

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def qt_message_handler(mode, context, message):
    if "Point size <= 0" in message:
        return  # Known benign warning
    logging.getLogger("log_viewer.qt").log(_QT_LEVELS.get(mode, logging.DEBUG), message)


def build_parser():
    parser = argparse.ArgumentParser(prog="log-viewer", description="View and search text log files")
    parser.add_argument("log", nargs="?", help="Log file to open")
    parser.add_argument("-p", "--pattern", help="Search pattern to apply after loading")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    qInstallMessageHandler(qt_message_handler)

    # Allow Ctrl+C to terminate the app from console
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    app = QApplication(sys.argv[:1])
    app.setOrganizationName(ORGANIZATION)
    app.setApplicationName(APPLICATION)

    window = MainWindow()

    if args.log:
        window.load_log(args.log)
    if args.pattern:
        window.search_input.setCurrentText(args.pattern)
        window.search_controller.search(args.pattern)

    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
