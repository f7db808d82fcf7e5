"""Launch the triage API with Backend/src on the Python path."""
import sys
import os

# Add Backend/src to path
backend_src = os.path.join(os.path.dirname(__file__), "src")
sys.path.insert(0, backend_src)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        reload=False,
        log_level="info",
    )
