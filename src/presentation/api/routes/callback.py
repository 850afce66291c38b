"""Deeplink callback page shown after paying in the Bakong app."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

callback_router = APIRouter()

SUCCESS_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Payment Completed</title>
  <style>
    body {
      font-family: Arial, sans-serif;
      display: flex;
      justify-content: center;
      align-items: center;
      height: 100vh;
      margin: 0;
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
    }
    .container {
      background: white;
      padding: 40px;
      border-radius: 10px;
      box-shadow: 0 10px 40px rgba(0, 0, 0, 0.2);
      text-align: center;
    }
    h1 { color: #28a745; margin-bottom: 10px; }
    p { color: #666; font-size: 18px; }
    .checkmark {
      width: 80px;
      height: 80px;
      line-height: 80px;
      border-radius: 50%;
      background: #28a745;
      margin: 20px auto;
      color: white;
      font-size: 50px;
    }
  </style>
</head>
<body>
  <div class="container">
    <div class="checkmark">&#10003;</div>
    <h1>Payment Successful!</h1>
    <p>Thank you for your payment.</p>
    <p>You can close this window now.</p>
  </div>
</body>
</html>
"""


@callback_router.get(
    "/payment/callback",
    response_class=HTMLResponse,
    summary="Payment Callback Page",
)
async def payment_callback() -> HTMLResponse:
    return HTMLResponse(content=SUCCESS_PAGE)
