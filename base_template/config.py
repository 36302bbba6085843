"""Configuration for the Trainable Base Template engine."""

from pathlib import Path

# Base data directory; snapshot backends default to files in here
DATA_DIR = Path("data")
SNAPSHOT_PATH = DATA_DIR / "knowledge_base.json"
SNAPSHOT_DB_PATH = DATA_DIR / "knowledge_base.db"

BUSINESS = {
    "name": "Jay's Mobile Wash",
    "phone": "562-228-9429",
}

TEMPLATE_CONFIG = {
    # Knowledge store
    "max_knowledge_entries": 10000,
    "pinned_sources": ["core_knowledge"],

    # Embeddings
    "embedding_backend": "hashing",  # hashing | sentence-transformers
    "embedding_dimensions": 384,
    "text_embedding_model": "all-MiniLM-L6-v2",

    # Retrieval
    "min_similarity": 0.3,
    "top_k": 5,
    "recency_window_days": 30,
    "recency_boost_weight": 0.2,
    "category_boost": 0.3,

    # Synthesis
    "confidence_threshold": 0.7,
    "general_similarity_floor": 0.5,
    "general_max_sources": 3,

    # Conversation memory
    "memory_window_size": 10,

    # Learning
    "learning_queue_flush_size": 10,
    "common_topic_min_count": 3,
    "min_learnable_length": 50,
    "generic_learnable_length": 100,
    "duplicate_similarity_threshold": 0.8,

    # Ingestion
    "chunk_max_length": 500,

    # LLM fallback
    "llm_model": "gpt-4o-mini",
    "llm_temperature": 0.3,
    "llm_max_retries": 3,
    "llm_retry_delay": 0.5,  # seconds, doubled per retry
    "llm_timeout": 30,
    "llm_history_turns": 6,
}
