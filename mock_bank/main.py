import json
import os
import uuid
from datetime import datetime, timezone

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from c2p_gateway.domain import crypto
from c2p_gateway.domain.exceptions import CryptoFault

DEFAULT_CLIENT_ID = os.getenv("MOCK_BANK_CLIENT_ID", "mock-client-id")
DEFAULT_SECRET_KEY = os.getenv("MOCK_BANK_SECRET_KEY", "mock-secret-key")

REJECTED_DESTINATION_ID = "V00000000"
FAILURE_CODE = 99999
APPROVED_CODE = 0


def create_app(
    client_id: str = DEFAULT_CLIENT_ID,
    secret_key: str = DEFAULT_SECRET_KEY,
    encrypt_responses: bool = True,
) -> FastAPI:
    app = FastAPI(title="Mock Mercantil C2P Server", version="1.0.0")

    @app.get("/health")
    def health(): return {"status": "ok"}

    @app.post("/payment/c2p")
    async def c2p(request: Request, x_ibm_client_id: str = Header(default="")):
        if x_ibm_client_id != client_id:
            raise HTTPException(status_code=401, detail="invalid client id")

        body = await request.json()
        try:
            envelope = json.loads(crypto.decrypt(body["data"], secret_key))
            trx = envelope["transaction_c2p"]
            destination_id = crypto.decrypt(trx["destination_id"], secret_key)
            crypto.decrypt(trx["origin_mobile_number"], secret_key)
            crypto.decrypt(trx["destination_mobile_number"], secret_key)
        except (CryptoFault, KeyError, TypeError, ValueError):
            raise HTTPException(status_code=400, detail="malformed c2p request")

        code = FAILURE_CODE if destination_id == REJECTED_DESTINATION_ID else APPROVED_CODE
        payload = {
            "processingDate": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            "infoMsg": {
                "guId": str(uuid.uuid4()),
                "channel": "06",
                "subchannel": "01",
                "applId": "",
                "personId": "",
                "userId": "",
                "token": "",
                "action": "trx",
            },
            "code": code,
        }
        if encrypt_responses:
            return JSONResponse(content={"data": crypto.encrypt(json.dumps(payload), secret_key)})
        return JSONResponse(content=payload)

    return app


app = create_app()
