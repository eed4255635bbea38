from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jsxlint.routers import lint

app = FastAPI(
    title="jsxlint",
    description="Checks that JSX tags and custom directives refer to defined bindings.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(lint.router)


@app.get("/api-status")
async def root():
    return {"message": "jsxlint server is running. Visit /docs for API documentation."}
