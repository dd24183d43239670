# config.py


class Config:
    DEBUG = False
    TESTING = False
    # keep the wire field order the dashboard was built against
    JSON_SORT_KEYS = False


class ProductionConfig(Config):
    pass


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
