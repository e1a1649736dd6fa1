"""
LaunchPad API Core Package

Directory Structure:
├── domain/            # Error taxonomy and event channel names
├── application/       # Validation, pagination, error formatting, services
│   ├── validation.py        # Schema-driven input validation
│   ├── pagination.py        # List parameters and the page envelope
│   ├── error_formatter.py   # What a caller may see of a failure
│   └── startup_service.py   # Startup directory use cases
├── infrastructure/    # In-process pub/sub for live updates
├── db/                # SQLAlchemy models, listings, query builder, repositories
├── schemas/           # Input validation schemas and Pydantic response models
├── web/               # FastAPI/Starlette adapters (errors, request id, params, streams)
├── dependencies.py    # FastAPI dependency providers
├── log.py             # Logging setup and request id context
└── config.py          # Application configuration

Schema Types Clarification:
1. **Input Schemas** (launchpad.schemas.input_schemas): declarative validation of untrusted input
2. **API Schemas** (launchpad.schemas.api_schemas): Pydantic models for responses and event payloads
3. **Database Models** (launchpad.db.models): SQLAlchemy tables
"""
