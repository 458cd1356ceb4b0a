import signal
import sys
from PySide6.QtWidgets import QApplication

from attention.shared.paths import ensure_app_dirs
from attention.core.logging_ import setup_logging
from .ui.tray import AttentionTray


def main() -> None:
    ensure_app_dirs()
    setup_logging()

    app = QApplication(sys.argv)
    app.setApplicationName("Attention")
    # Lives in the tray; closing a media window must not end the app
    app.setQuitOnLastWindowClosed(False)
    tray = AttentionTray(app)

    # Handle Ctrl+C gracefully (works on Unix/Linux/Mac)
    def signal_handler(sig, frame):
        print("\nReceived interrupt signal (Ctrl+C), shutting down...")
        tray.quit()

    if hasattr(signal, 'SIGINT'):
        signal.signal(signal.SIGINT, signal_handler)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
