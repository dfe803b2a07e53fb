"""Run the gateway with uvicorn: ``python -m compliance_assistant.gateway``"""
import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "compliance_assistant.gateway.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080"))
    )
