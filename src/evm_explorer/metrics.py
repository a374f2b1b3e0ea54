from prometheus_client import Counter, Histogram, start_http_server
from loguru import logger

# RPC metrics
RPC_REQUESTS = Counter(
    'explorer_rpc_requests_total',
    'Total number of RPC requests made',
    ['chain', 'method']
)

RPC_ERRORS = Counter(
    'explorer_rpc_errors_total',
    'Total number of RPC errors encountered',
    ['chain', 'method']
)

RPC_LATENCY = Histogram(
    'explorer_rpc_latency_seconds',
    'RPC request latency',
    ['chain', 'method'],
    buckets=[0.025, 0.05, 0.075, 0.1, 0.15, 0.2, 0.3, 0.5, 1.0, 5.0, 10.0]
)

def start_metrics_server(port: int = 8000, addr: str = '127.0.0.1'):
    """Start Prometheus metrics server
    
    Args:
        port (int): Port to listen on
        addr (str): Address to bind to
    """
    logger.info(f"Starting Prometheus metrics server on {addr}:{port}")
    start_http_server(port, addr)
