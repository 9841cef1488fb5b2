"""All magic values live here — no inline literals anywhere else."""

# Environment variables
ENV_LLM_ENDPOINT = "LLM_ENDPOINT"
ENV_LLM_MODEL = "LLM_MODEL"
ENV_AZURE_OPENAI_ENDPOINT = "AZURE_OPENAI_ENDPOINT"
ENV_AZURE_OPENAI_API_KEY = "AZURE_OPENAI_API_KEY"
ENV_AZURE_OPENAI_MODEL = "AZURE_OPENAI_MODEL"
ENV_AZURE_OPENAI_API_VERSION = "AZURE_OPENAI_API_VERSION"
ENV_AZURE_ANTHROPIC_ENDPOINT = "AZURE_ANTHROPIC_ENDPOINT"
ENV_AZURE_ANTHROPIC_API_KEY = "AZURE_ANTHROPIC_API_KEY"
ENV_AZURE_ANTHROPIC_MODEL = "AZURE_ANTHROPIC_MODEL"
ENV_GEMINI_API_KEY = "GEMINI_API_KEY"
ENV_GEMINI_MODEL = "GEMINI_MODEL"
ENV_DEBUG = "CLIPSCRIBE_DEBUG"
ENV_LOG_LEVEL = "LOG_LEVEL"

# Backend defaults
DEFAULT_LOCAL_MODEL = "local-model"
DEFAULT_AZURE_OPENAI_API_VERSION = "2025-04-01-preview"
DEFAULT_AZURE_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"

# Per-backend request timeouts (seconds).
# Local models are slow to answer; video uploads are large.
LOCAL_TIMEOUT: float = 120.0
AZURE_OPENAI_TIMEOUT: float = 30.0
AZURE_ANTHROPIC_TIMEOUT: float = 60.0
GEMINI_TIMEOUT: float = 300.0

# Wire paths
LOCAL_API_PATH = "/v1"
AZURE_OPENAI_API_PATH = "/openai"
AZURE_API_VERSION_PARAM = "api-version"
GEMINI_UPLOAD_PATH = "/upload/v1beta/files"
GEMINI_FILES_PATH = "/v1beta/files"
GEMINI_GENERATE_PATH = "/v1beta/models/%s:generateContent"
GEMINI_KEY_PARAM = "key"

# Generation parameters
CHAT_MAX_TOKENS = 512
CHAT_TEMPERATURE = 0.1
RESPONSES_MAX_OUTPUT_TOKENS = 2048
ANTHROPIC_MAX_TOKENS = 1024
TRANSCRIBE_TEMPERATURE = 0.1
TRANSCRIBE_MAX_OUTPUT_TOKENS = 8192

# Placeholder credential for the local backend; the Authorization header is dropped.
LOCAL_API_KEY_PLACEHOLDER = "not-needed"

# Gemini resumable upload headers
HDR_UPLOAD_PROTOCOL = "X-Goog-Upload-Protocol"
HDR_UPLOAD_COMMAND = "X-Goog-Upload-Command"
HDR_UPLOAD_CONTENT_LENGTH = "X-Goog-Upload-Header-Content-Length"
HDR_UPLOAD_CONTENT_TYPE = "X-Goog-Upload-Header-Content-Type"
HDR_UPLOAD_URL = "X-Goog-Upload-URL"
HDR_UPLOAD_OFFSET = "X-Goog-Upload-Offset"
UPLOAD_PROTOCOL_RESUMABLE = "resumable"
UPLOAD_COMMAND_START = "start"
UPLOAD_COMMAND_FINALIZE = "upload, finalize"

# Gemini file processing
FILE_STATE_ACTIVE = "ACTIVE"
FILE_STATE_FAILED = "FAILED"
POLL_INTERVAL: float = 2.0
POLL_TIMEOUT: float = 300.0

# Content types
DEFAULT_VIDEO_MIME = "video/mp4"
VIDEO_MIME_FALLBACKS = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
    ".flv": "video/x-flv",
    ".wmv": "video/x-ms-wmv",
    ".m4v": "video/x-m4v",
}

# Diagnostics
BODY_EXCERPT_LIMIT = 500
REDACT_VISIBLE_CHARS = 4
REDACTED = "****"

# Progress labels
MSG_UPLOADING = "Uploading video to Gemini..."
MSG_PROCESSING = "Processing video..."
MSG_GENERATING = "Generating transcript..."
MSG_CONNECTING = "Connecting to AI"
MSG_SENDING = "Sending request to %s"
MSG_PARSING = "Parsing response"
MSG_PARSED = "Parsing complete"

# Error messages
MSG_NO_BACKEND = "No AI backend configured"
MSG_MISSING_VAR = "%s environment variable not set"
MSG_INVALID_ENDPOINT = "Invalid %s URL: %s"
MSG_UNKNOWN_PROVIDER = "Unknown provider: %s"
MSG_NO_CHOICES = "No choices in AI response"
MSG_NO_CONTENT = "No content in AI response"
MSG_NO_TRANSCRIPT = "No transcript generated"
MSG_NO_UPLOAD_URL = "No upload URL in response"
MSG_NO_FILE_URI = "No file URI in upload response"
MSG_NOT_JSON = "Failed to parse API response: %s"
MSG_BAD_CLIP_JSON = "Failed to parse AI response: %s"
MSG_BAD_CLIP_SHAPE = "AI response is not a clip object"
MSG_CLIP_REJECTED = "AI could not parse request: %s"
MSG_CLIP_BAD_TIMESTAMP = "Invalid timestamp in AI response: %r"
MSG_CLIP_ORDER = "Clip end %s is not after start %s"
MSG_CLIP_PAST_END = "Clip end %s exceeds video duration %s"
MSG_FILE_FAILED = "File processing failed"
MSG_POLL_TIMEOUT = "Timeout waiting for file processing"
MSG_CANCELLED = "%s cancelled"
MSG_REQUEST_FAILED = "AI request failed: %s"
MSG_LOCAL_UNREACHABLE = "AI request failed (is the LLM server running?): %s"

# Transcription prompt
TRANSCRIBE_PROMPT = (
    "Please transcribe all spoken content in this video. \n"
    "Provide the transcript in plain text format.\n"
    "If there are multiple speakers, indicate speaker changes.\n"
    "Include timestamps in [MM:SS] format at natural breaks in the conversation.\n"
    "If there is no speech, indicate that the video has no spoken content."
)

# Clip parsing prompt; %s is the video duration as HH:MM:SS
CLIP_SYSTEM_PROMPT = (
    "You are a helpful assistant that parses video clipping requests into timestamps.\n"
    "\n"
    "The video duration is: %s\n"
    "\n"
    "Your job is to extract start_time and end_time from the user's natural language request.\n"
    "\n"
    "IMPORTANT RULES:\n"
    "1. Output times in HH:MM:SS format (e.g., 00:03:00 for 3 minutes)\n"
    '2. If the user says "first X minutes/seconds", start_time is 00:00:00\n'
    '3. If the user says "last X minutes/seconds", calculate from the video duration\n'
    "4. If the user gives a duration from a start point, calculate the end_time\n"
    "5. Ensure end_time does not exceed the video duration\n"
    "6. If you cannot understand the request, set an error message\n"
    "\n"
    "Respond ONLY with valid JSON in this exact format:\n"
    '{"start_time": "HH:MM:SS", "end_time": "HH:MM:SS"}\n'
    "\n"
    "Or if there's an error:\n"
    '{"start_time": "", "end_time": "", "error": "description of the problem"}'
)

MSG_BACKEND_HELP = (
    "To use clipscribe, you need an AI backend configured.\n"
    "\n"
    "Option 1: Local LLM (no API key needed)\n"
    "  LM Studio:\n"
    "    1. Download from https://lmstudio.ai\n"
    "    2. Load a model and start the local server (default port 1234)\n"
    '    3. export LLM_ENDPOINT="http://localhost:1234"\n'
    "  Ollama:\n"
    "    1. Install from https://ollama.ai and run: ollama run llama3.2\n"
    '    2. export LLM_ENDPOINT="http://localhost:11434"\n'
    '       export LLM_MODEL="llama3.2"\n'
    "\n"
    "Option 2: Azure Anthropic (Claude)\n"
    '  export AZURE_ANTHROPIC_ENDPOINT="https://your-resource.services.ai.azure.com"\n'
    '  export AZURE_ANTHROPIC_API_KEY="your-api-key"\n'
    '  export AZURE_ANTHROPIC_MODEL="claude-sonnet-4-20250514"  # optional\n'
    "\n"
    "Option 3: Azure OpenAI\n"
    '  export AZURE_OPENAI_ENDPOINT="https://your-resource.cognitiveservices.azure.com"\n'
    '  export AZURE_OPENAI_API_KEY="your-api-key"\n'
    '  export AZURE_OPENAI_MODEL="gpt-4o"\n'
    "\n"
    "Or put these values in a .env file.\n"
    "LLM_ENDPOINT takes precedence over the cloud settings when both are present."
)

MSG_GEMINI_HELP = (
    "To use video transcription, you need a Google Gemini API key.\n"
    "\n"
    "Setup:\n"
    "  1. Go to https://aistudio.google.com/apikey\n"
    "  2. Create an API key\n"
    '  3. export GEMINI_API_KEY="your-api-key"  (or add it to your .env file)\n'
    "\n"
    "Optional:\n"
    "  GEMINI_MODEL - model to use (default: gemini-2.0-flash)"
)

# CLI
CLI_PROG = "clipscribe"
CMD_CLIP = "clip"
CMD_TRANSCRIBE = "transcribe"
EXIT_BACKEND_ERROR = 1
EXIT_CONFIG_ERROR = 2
