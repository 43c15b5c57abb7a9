# sentiprep/config.py
import tempfile
from pathlib import Path

# Root directories (outside the installed package)
HOME_DATA_DIR = Path.home() / "sentiprep-data"
MODELS_DIR = HOME_DATA_DIR / "models"
LOGS_DIR = HOME_DATA_DIR / "logs"

# IMDB corpus (downloaded and extracted under the system temp dir)
DATA_URL = "http://ai.stanford.edu/~amaas/data/sentiment/aclImdb_v1.tar.gz"
DATA_DIR = Path(tempfile.gettempdir()) / "w2v_sentiment"
ARCHIVE_NAME = "aclImdb_v1.tar.gz"
EXTRACTED_NAME = "aclImdb"

# Presaved batches
PRESAVED_DIR = HOME_DATA_DIR / "imdbpresaved"
TRAIN_DIR = PRESAVED_DIR / "train"
TEST_DIR = PRESAVED_DIR / "test"

# Google News vectors. Set this manually to a local copy.
W2V_PLACEHOLDER_PREFIX = "/PATH/TO/YOUR/VECTORS/"
W2V_FILENAME = "GoogleNews-vectors-negative300.bin.gz"
WORD_VECTORS_PATH = W2V_PLACEHOLDER_PREFIX + W2V_FILENAME
W2V_DEFAULT_DIR = HOME_DATA_DIR / "w2vec300"
W2V_URL = "https://dl4jdata.blob.core.windows.net/resources/wordvectors/" + W2V_FILENAME
W2V_MD5 = "1c892c4707a8a1a508b01a01735c0339"
W2V_DOWNLOAD_RETRIES = 5

# Preprocessing defaults
DEFAULT_BATCH_SIZE = 64
DEFAULT_MAX_LENGTH = 256
EXTRACT_BUFFER_SIZE = 4096
EXTRACT_PROGRESS_EVERY = 1000
SAVE_LOG_EVERY = 500

# Training defaults
DEFAULT_EPOCHS = 2
DEFAULT_LR = 1e-3
DEFAULT_WEIGHT_DECAY = 1e-5
HIDDEN_SIZE = 256
SEED = 42
MODEL_FILENAME = "best_sentiment_lstm.pth"
STATS_FILENAME = "dataset_stats.json"
