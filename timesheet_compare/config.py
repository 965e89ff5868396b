import os


class Settings:
    """應用程式配置設定"""

    # 資料庫設定
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./timesheet_compare.db")

    # 應用設定
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Dubai")
    DATE_FORMAT: str = os.getenv("DATE_FORMAT", "%d/%m/%Y")

    # 差異檢測設定
    LOW_HOURS_MIN: float = float(os.getenv("LOW_HOURS_MIN", "3"))
    LOW_HOURS_MAX: float = float(os.getenv("LOW_HOURS_MAX", "4"))
    # spreadsheet_missing: 試算表缺值而資料庫有值; database_missing: 反向
    MISSING_DETECTION_DIRECTION: str = os.getenv("MISSING_DETECTION_DIRECTION", "spreadsheet_missing")

    # 寫入設定
    DEFAULT_CHECKOUT_TYPE: str = os.getenv("DEFAULT_CHECKOUT_TYPE", "manual")

    # 部署設定
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # 日誌設定
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # API 設定
    API_VERSION: str = os.getenv("API_VERSION", "v1")
    API_PREFIX: str = f"/api/{API_VERSION}"

    @property
    def database_url(self) -> str:
        """獲取資料庫 URL，處理 Render.com 格式"""
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @property
    def is_sqlite(self) -> bool:
        """檢查是否使用 SQLite"""
        return self.database_url.startswith("sqlite")

    def validate_required_settings(self) -> list:
        """驗證必要設定"""
        invalid = []

        if not self.DATABASE_URL:
            invalid.append("DATABASE_URL")

        try:
            import pytz
            pytz.timezone(self.TIMEZONE)
        except Exception:
            invalid.append("TIMEZONE")

        if self.MISSING_DETECTION_DIRECTION not in ("spreadsheet_missing", "database_missing"):
            invalid.append("MISSING_DETECTION_DIRECTION")

        if self.LOW_HOURS_MIN >= self.LOW_HOURS_MAX:
            invalid.append("LOW_HOURS_MIN/LOW_HOURS_MAX")

        return invalid

    def get_logging_config(self) -> dict:
        """獲取日誌配置"""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": self.LOG_FORMAT,
                },
            },
            "handlers": {
                "default": {
                    "formatter": "default",
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": self.LOG_LEVEL,
                "handlers": ["default"],
            },
        }


# 全域設定實例
settings = Settings()

# 驗證設定
def validate_settings():
    """驗證應用程式設定"""
    invalid = settings.validate_required_settings()

    if invalid:
        raise ValueError(f"Invalid or missing settings: {', '.join(invalid)}")

# 匯出常用設定
DATABASE_URL = settings.database_url
DEBUG = settings.DEBUG
TIMEZONE = settings.TIMEZONE
