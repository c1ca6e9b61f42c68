"""
WebSocket event definitions and helpers
"""
from typing import Dict, Any, Optional
from datetime import datetime, timezone


def _envelope(event_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": event_type,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "data": data,
    }


def create_slot_availability_event(
    time_slot_id: str,
    center_id: str,
    slot_date: str,
    available_slots: int,
    total_capacity: int
) -> Dict[str, Any]:
    """Remaining capacity of a slot changed"""
    return _envelope("slot_availability", {
        "time_slot_id": time_slot_id,
        "center_id": center_id,
        "date": slot_date,
        "available_slots": available_slots,
        "total_capacity": total_capacity,
    })


def create_appointment_status_event(
    appointment_id: str,
    booking_id: str,
    aadhaar_record_id: str,
    status: str,
    previous_status: Optional[str] = None
) -> Dict[str, Any]:
    """Appointment was booked or moved to another status"""
    return _envelope("appointment_status", {
        "appointment_id": appointment_id,
        "booking_id": booking_id,
        "aadhaar_record_id": aadhaar_record_id,
        "status": status,
        "previous_status": previous_status,
    })


def create_fraud_alert_event(
    fraud_log_id: str,
    event_type: str,
    risk_level: str,
    aadhaar_record_id: Optional[str] = None
) -> Dict[str, Any]:
    """New fraud log entry for the admin dashboard"""
    return _envelope("fraud_alert", {
        "fraud_log_id": fraud_log_id,
        "event_type": event_type,
        "risk_level": risk_level,
        "aadhaar_record_id": aadhaar_record_id,
    })
