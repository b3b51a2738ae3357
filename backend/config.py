import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///phom.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Create missing tables at startup instead of requiring `flask db upgrade`
    CREATE_TABLES_ON_START = os.environ.get('CREATE_TABLES_ON_START', '1') == '1'
    # Points prefilled on a new manual transfer
    DEFAULT_TRANSFER_POINTS = int(os.environ.get('DEFAULT_TRANSFER_POINTS', '4'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
