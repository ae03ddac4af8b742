import os
from dotenv import load_dotenv
load_dotenv()
# ---- CKB JSON-RPC ----
CKB_MAINNET_RPC_URL = "https://mainnet.ckb.dev"
CKB_TESTNET_RPC_URL = "https://testnet.ckb.dev"
CKB_RPC_URL = os.environ.get("CKB_RPC_URL")          # overrides mainnet/testnet choice

CKB_RPC_REQUESTS_PER_SEC = float(os.environ.get("CKB_RPC_REQUESTS_PER_SEC", "10"))
CKB_RPC_TIMEOUT_SEC = int(os.environ.get("CKB_RPC_TIMEOUT_SEC", "15"))
CKB_RPC_MAX_RETRIES = int(os.environ.get("CKB_RPC_MAX_RETRIES", "3"))

# ---- Input resolution ----
RESOLVER_MAX_WORKERS = int(os.environ.get("RESOLVER_MAX_WORKERS", "8"))

# ---- Illustration geometry ----
ILLUSTRATION_WIDTH = 960
ILLUSTRATION_NODE_DX = 20
ILLUSTRATION_MIN_RADIUS = float(os.environ.get("ILLUSTRATION_MIN_RADIUS", "0.5"))

# ---- Logging ----
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")
LOG_FORMAT = os.environ.get("LOG_FORMAT", "console")   # console | json
