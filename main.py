from dotenv import load_dotenv
load_dotenv()
import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from helpers.tortoise_config import lifespan
from controllers.tutor_controller import tutor_router
from controllers.appointment_controller import appointment_router
from controllers.availability_controller import availability_router
from controllers.captcha_controller import captcha_router
from controllers.email_controller import email_router


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(message)s"
)


app = FastAPI(lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(tutor_router, prefix='/api', tags=['Tutors'])
app.include_router(appointment_router, prefix='/api', tags=['Appointments'])
app.include_router(availability_router, prefix='/api', tags=['Availability'])
app.include_router(captcha_router, prefix='/api', tags=['Captcha'])
app.include_router(email_router, prefix='/api', tags=['Email'])


@app.get('/')
def greetings():
    return {
        "Message": "Tutor booking API is running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
