import sys, os

from pac import __version__
from pac.errors import PacError
from pac.logging_utils import configure_logging, GuiLogger
from pac.run import ExtractionRun, RunState
from pac.settings import load_settings, save_settings

# --- System library check (Linux: libxcb-cursor0 for Qt) ---
def check_system_libs():
    import platform
    if platform.system() == "Linux":
        # Check for libxcb-cursor0 (required for Qt xcb plugin)
        import ctypes.util
        lib = ctypes.util.find_library("xcb-cursor")
        if not lib:
            msg = (
                "\n[WARNING] missing system library: libxcb-cursor0\n"
                "The Qt window may fail to start on Linux without it.\n"
                "\nDebian/Ubuntu:\n"
                "  sudo apt-get update && sudo apt-get install libxcb-cursor0\n"
                "\nFedora/RedHat:\n"
                "  sudo dnf install xcb-util-cursor\n"
            )
            print(msg)

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QPushButton, QTextEdit, QFileDialog, QLabel, QHBoxLayout,
    QMessageBox, QLineEdit, QTreeWidget, QTreeWidgetItem, QProgressBar, QStatusBar, QSplitter
)
from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtCore import Qt
from ui_theme import get_stylesheet, available_themes

# Simple i18n (English / Thai)
LANG = "en"
_STRINGS = {
    'app_title': {'en': 'PAC Extractor', 'th': 'PAC Extractor'},
    'btn_browse': {'en': 'Browse', 'th': 'เลือก'},
    'btn_open_fw': {'en': 'Open Firmware', 'th': 'เปิดไฟล์เฟิร์มแวร์'},
    'btn_extract': {'en': 'Extract', 'th': 'แตกไฟล์'},
    'btn_clear_logs': {'en': 'Clear Logs', 'th': 'ล้างบันทึก'},
    'label_output': {'en': 'Output Folder', 'th': 'โฟลเดอร์ผลลัพธ์'},
    'label_firmware': {'en': 'Firmware File', 'th': 'ไฟล์เฟิร์มแวร์'},
    'placeholder_select_fw': {'en': 'Select .pac firmware...', 'th': 'เลือกไฟล์ .pac ...'},
    'col_partition': {'en': 'Partition', 'th': 'พาร์ทิชัน'},
    'col_file': {'en': 'File name', 'th': 'ชื่อไฟล์'},
    'col_size': {'en': 'Size', 'th': 'ขนาด'},
    'col_offset': {'en': 'Offset', 'th': 'ตำแหน่ง'},
    'menu_theme': {'en': 'Theme', 'th': 'ธีม'},
    'menu_help': {'en': 'Help', 'th': 'ช่วยเหลือ'},
    'act_about': {'en': 'About', 'th': 'เกี่ยวกับ'},
    'err_title': {'en': 'Extraction failed', 'th': 'แตกไฟล์ไม่สำเร็จ'},
    'warn_no_fw': {'en': 'Select a firmware file first', 'th': 'กรุณาเลือกไฟล์ firmware ก่อน'},
}
def _(key):
    return _STRINGS.get(key, {}).get(LANG, key)


class MainWindow(QMainWindow):
    """Firmware/output selectors, partition table view, extract button, progress & log."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle(_("app_title"))
        self.settings = load_settings()
        self.fw_path: str | None = None
        self.output_dir = self.settings.get('last_output_dir') or os.path.abspath("output")
        self.descriptors = []

        central = QWidget(); main_v = QVBoxLayout(central)

        # Firmware selection
        fw_h = QHBoxLayout(); fw_h.addWidget(QLabel(_("label_firmware")))
        self.fw_line = QLineEdit(); self.fw_line.setPlaceholderText(_("placeholder_select_fw")); self.fw_line.setReadOnly(True); fw_h.addWidget(self.fw_line)
        btn_fw = QPushButton(_("btn_open_fw")); btn_fw.clicked.connect(self.select_firmware); fw_h.addWidget(btn_fw)
        main_v.addLayout(fw_h)

        # Output folder selector
        out_h = QHBoxLayout(); out_h.addWidget(QLabel(_("label_output")))
        self.output_edit = QLineEdit(self.output_dir); out_h.addWidget(self.output_edit)
        btn_out = QPushButton(_("btn_browse")); btn_out.clicked.connect(self.select_output_folder); out_h.addWidget(btn_out)
        main_v.addLayout(out_h)

        # Partition table + log
        split = QSplitter(Qt.Vertical)
        self.tree = QTreeWidget(); self.tree.setHeaderLabels([_("col_partition"), _("col_file"), _("col_size"), _("col_offset")])
        split.addWidget(self.tree)
        self.log_view = QTextEdit(); self.log_view.setReadOnly(True); split.addWidget(self.log_view)
        main_v.addWidget(split, 1)

        self.progress = QProgressBar(); self.progress.setRange(0, 1000); self.progress.setValue(0); main_v.addWidget(self.progress)

        btn_h = QHBoxLayout()
        self.btn_extract = QPushButton(_("btn_extract")); self.btn_extract.setProperty('category', 'ok'); self.btn_extract.clicked.connect(self.do_extract); btn_h.addWidget(self.btn_extract)
        btn_clear = QPushButton(_("btn_clear_logs")); btn_clear.setProperty('category', 'danger'); btn_clear.clicked.connect(self.clear_logs); btn_h.addWidget(btn_clear)
        btn_h.addStretch(); main_v.addLayout(btn_h)

        self.theme = self.settings.get('theme', 'dark')
        self.setCentralWidget(central)
        self.setStyleSheet(get_stylesheet(self.theme))
        self.status = QStatusBar(); self.setStatusBar(self.status)
        self.gui_log = GuiLogger(self._append_log)
        self._create_menus(); self.update_status()
        self.resize(1000, 700)

    # ---------- Utility / Logging ----------
    def _append_log(self, text):
        self.log_view.append(text); self.log_view.ensureCursorVisible(); self.status.showMessage(text.splitlines()[0][:120] if text else '')
    def log(self, text):
        self.gui_log(text)
    def clear_logs(self):
        self.log_view.clear(); self.log("[LOG CLEARED]")
    def update_status(self):
        fw = os.path.basename(self.fw_path) if self.fw_path else "(no fw)"
        self.status.showMessage(f"FW: {fw} | Parts: {len(self.descriptors)} | Out: {self.output_dir}")

    # ---------- Menus ----------
    def _create_menus(self):
        mb = self.menuBar()
        m_theme = mb.addMenu(_("menu_theme"))
        group = QActionGroup(self)
        for name in available_themes():
            act = QAction(name, self, checkable=True)
            act.setChecked(name == self.theme)
            act.triggered.connect(lambda checked=False, nm=name: self._apply_theme(nm))
            group.addAction(act); m_theme.addAction(act)
        m_help = mb.addMenu(_("menu_help"))
        m_help.addAction(QAction(_("act_about"), self, triggered=lambda: QMessageBox.information(self, _("act_about"), f"PAC Extractor {__version__}")))

    def _apply_theme(self, name):
        self.theme = name
        self.setStyleSheet(get_stylesheet(name))
        self._save_settings()

    def _save_settings(self):
        self.settings['theme'] = self.theme
        self.settings['last_output_dir'] = self.output_dir
        if self.fw_path:
            self.settings['last_firmware_dir'] = os.path.dirname(self.fw_path)
        try:
            save_settings(self.settings)
        except OSError as e:
            self.log(f"[settings] not saved: {e}")

    # ---------- Basic actions ----------
    def select_output_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Select output folder", self.output_dir)
        if folder:
            self.output_dir = folder; self.output_edit.setText(folder); self._save_settings(); self.update_status()

    def select_firmware(self):
        file, _filter = QFileDialog.getOpenFileName(self, "Select PAC firmware", self.settings.get('last_firmware_dir', ''), "PAC firmware (*.pac);;All files (*)")
        if file:
            self.fw_path = file
            self.fw_line.setText(file)
            self.log(f"Selected: {file}")
            self._save_settings()
            self.load_partition_table()

    def load_partition_table(self):
        self.tree.clear(); self.descriptors = []
        try:
            header, self.descriptors = ExtractionRun(self.fw_path, log_func=self.log).discover()
        except PacError as e:
            self.log(f"[ERROR] {e}")
            QMessageBox.warning(self, _("err_title"), str(e))
            self.update_status()
            return
        for d in self.descriptors:
            item = QTreeWidgetItem([d.partition_name, d.file_name, str(d.partition_size), f"0x{d.addr_in_container:X}"])
            if d.partition_size == 0:
                item.setDisabled(True)
            self.tree.addTopLevelItem(item)
        for col in range(4):
            self.tree.resizeColumnToContents(col)
        self.update_status()

    def _progress_for(self, desc):
        def update(fraction):
            self.progress.setValue(int(fraction * 1000))
            self.progress.setFormat(f"{desc.file_name} %p%")
            QApplication.processEvents()
        return update

    def do_extract(self):
        if not self.fw_path:
            QMessageBox.warning(self, _("app_title"), _("warn_no_fw")); return
        self.output_dir = self.output_edit.text().strip() or self.output_dir
        self._save_settings()
        self.btn_extract.setEnabled(False); self.progress.setValue(0)
        run = ExtractionRun(self.fw_path, self.output_dir, log_func=self.log, progress_factory=self._progress_for)
        try:
            results = run.run()
        except PacError as e:
            self.log(f"[ERROR] {e}")
            QMessageBox.critical(self, _("err_title"), str(e))
        else:
            written = [r for r in results if not r.skipped]
            self.log(f"✅ {len(written)} partition(s) written to {self.output_dir}")
        finally:
            self.btn_extract.setEnabled(True)
            self.descriptors = run.descriptors or self.descriptors
            self.update_status()
        return run.state == RunState.DONE


def main():
    check_system_libs()
    configure_logging()
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
