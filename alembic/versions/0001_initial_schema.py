"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'CITIZEN', name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_phone', 'users', ['phone'], unique=True)

    op.create_table(
        'aadhaar_records',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('aadhaar_number', sa.String(12), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(20), nullable=True),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('district', sa.String(100), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('pincode', sa.String(10), nullable=False),
        sa.Column('locality', sa.String(255), nullable=True),
        sa.Column('landmark', sa.String(255), nullable=True),
        sa.Column('house_number', sa.String(100), nullable=True),
        sa.Column('street', sa.String(255), nullable=True),
        sa.Column('care_of', sa.String(255), nullable=True),
        sa.Column('guardian_name', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('photo_url', sa.String(512), nullable=True),
        sa.Column('fingerprint_status', sa.String(20), nullable=True),
        sa.Column('iris_status', sa.String(20), nullable=True),
        sa.Column('face_scan_status', sa.String(20), nullable=True),
        sa.Column('last_biometric_update', sa.Date(), nullable=True),
        sa.Column('biometric_expiry_date', sa.Date(), nullable=True),
        sa.Column('enrollment_number', sa.String(28), nullable=True),
        sa.Column('enrollment_date', sa.Date(), nullable=True),
        sa.Column('registration_center', sa.String(255), nullable=True),
        sa.Column('card_type', sa.String(20), nullable=True),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('verification_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_eid_linked', sa.Boolean(), nullable=False),
        sa.Column('eid_number', sa.String(20), nullable=True),
        sa.Column('mobile_verified', sa.Boolean(), nullable=False),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_aadhaar_records_user_id', 'aadhaar_records', ['user_id'], unique=True)
    op.create_index('ix_aadhaar_records_aadhaar_number', 'aadhaar_records', ['aadhaar_number'], unique=True)
    op.create_index('ix_aadhaar_records_state', 'aadhaar_records', ['state'])
    op.create_index('ix_aadhaar_records_district', 'aadhaar_records', ['district'])
    op.create_index('ix_aadhaar_records_status', 'aadhaar_records', ['status'])

    op.create_table(
        'otp_verification',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('aadhaar_number', sa.String(12), nullable=False),
        sa.Column('otp', sa.String(6), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used', sa.Boolean(), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_otp_verification_aadhaar_number', 'otp_verification', ['aadhaar_number'])
    op.create_index('ix_otp_verification_expires_at', 'otp_verification', ['expires_at'])
    op.create_index('ix_otp_verification_number_type', 'otp_verification', ['aadhaar_number', 'type'])

    op.create_table(
        'centers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('pincode', sa.String(10), nullable=True),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('latitude', sa.Numeric(10, 8), nullable=True),
        sa.Column('longitude', sa.Numeric(11, 8), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('working_hours_start', sa.Time(), nullable=True),
        sa.Column('working_hours_end', sa.Time(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_centers_city_state', 'centers', ['city', 'state'])
    op.create_index('ix_centers_coordinates', 'centers', ['latitude', 'longitude'])

    op.create_table(
        'update_types',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('risk_level', sa.String(20), nullable=False),
        sa.Column('requires_verification', sa.Boolean(), nullable=False),
        sa.Column('requires_biometric', sa.Boolean(), nullable=False),
        sa.Column('can_do_online', sa.Boolean(), nullable=False),
        sa.Column('estimated_time_minutes', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_update_types_risk_level', 'update_types', ['risk_level'])
    op.create_index('ix_update_types_requires_biometric', 'update_types', ['requires_biometric'])
    op.create_index('ix_update_types_can_do_online', 'update_types', ['can_do_online'])

    op.create_table(
        'time_slots',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('center_id', sa.String(36), sa.ForeignKey('centers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('total_capacity', sa.Integer(), nullable=False),
        sa.Column('available_slots', sa.Integer(), nullable=False),
        sa.Column('risk_level', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('center_id', 'date', 'start_time', name='uq_time_slots_center_date_start'),
        sa.CheckConstraint(
            'available_slots >= 0 AND available_slots <= total_capacity',
            name='ck_time_slots_available_within_capacity',
        ),
    )
    op.create_index('ix_time_slots_center_date', 'time_slots', ['center_id', 'date'])

    op.create_table(
        'appointments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('booking_id', sa.String(20), nullable=False),
        sa.Column('aadhaar_record_id', sa.String(36), sa.ForeignKey('aadhaar_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('center_id', sa.String(36), sa.ForeignKey('centers.id'), nullable=False),
        sa.Column('update_type_id', sa.String(36), sa.ForeignKey('update_types.id'), nullable=False),
        sa.Column('time_slot_id', sa.String(36), sa.ForeignKey('time_slots.id'), nullable=True),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('scheduled_time', sa.Time(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('scheduled', 'completed', 'cancelled', 'no-show', 'in-review',
                    name='appointmentstatus', native_enum=False, length=30),
            nullable=False,
        ),
        sa.Column('is_online', sa.Boolean(), nullable=False),
        sa.Column('is_biometric_auto_assigned', sa.Boolean(), nullable=False),
        sa.Column('auto_booked', sa.Boolean(), nullable=False),
        sa.Column('queue_position', sa.Integer(), nullable=True),
        sa.Column('counter_number', sa.Integer(), nullable=True),
        sa.Column('estimated_wait_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_appointments_booking_id', 'appointments', ['booking_id'], unique=True)
    op.create_index('ix_appointments_aadhaar_record_id', 'appointments', ['aadhaar_record_id'])
    op.create_index('ix_appointments_center_id', 'appointments', ['center_id'])
    op.create_index('ix_appointments_scheduled_date', 'appointments', ['scheduled_date'])
    op.create_index('ix_appointments_status', 'appointments', ['status'])

    op.create_table(
        'documents',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('appointment_id', sa.String(36), sa.ForeignKey('appointments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('document_type', sa.String(255), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=True),
        sa.Column('s3_url', sa.String(512), nullable=True),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('uploaded_by_user', sa.Boolean(), nullable=False),
        sa.Column('reviewed_by', sa.String(36), nullable=True),
        *_timestamps(),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_documents_appointment_id', 'documents', ['appointment_id'])
    op.create_index('ix_documents_status', 'documents', ['status'])

    op.create_table(
        'update_history',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('appointment_id', sa.String(36), sa.ForeignKey('appointments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('aadhaar_record_id', sa.String(36), sa.ForeignKey('aadhaar_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('update_type_id', sa.String(36), sa.ForeignKey('update_types.id'), nullable=False),
        sa.Column('field_name', sa.String(255), nullable=False),
        sa.Column('old_value', sa.Text(), nullable=True),
        sa.Column('new_value', sa.Text(), nullable=True),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('urn', sa.String(50), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('approved_by', sa.String(36), nullable=True),
        *_timestamps(),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_update_history_appointment_id', 'update_history', ['appointment_id'])
    op.create_index('ix_update_history_aadhaar_record_id', 'update_history', ['aadhaar_record_id'])
    op.create_index('ix_update_history_status', 'update_history', ['status'])
    op.create_index('ix_update_history_urn', 'update_history', ['urn'], unique=True)

    op.create_table(
        'fraud_logs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('aadhaar_record_id', sa.String(36), sa.ForeignKey('aadhaar_records.id', ondelete='SET NULL'), nullable=True),
        sa.Column('appointment_id', sa.String(36), sa.ForeignKey('appointments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('event_type', sa.String(100), nullable=False),
        sa.Column('risk_level', sa.String(20), nullable=False),
        sa.Column('confidence_score', sa.Numeric(3, 2), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('action_taken', sa.String(100), nullable=True),
        sa.Column('resolved', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('detected_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_fraud_logs_aadhaar_record_id', 'fraud_logs', ['aadhaar_record_id'])
    op.create_index('ix_fraud_logs_risk_level', 'fraud_logs', ['risk_level'])
    op.create_index('ix_fraud_logs_detected_at', 'fraud_logs', ['detected_at'])

    op.create_table(
        'center_load',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('center_id', sa.String(36), sa.ForeignKey('centers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('current_load', sa.Integer(), nullable=False),
        sa.Column('predicted_load', sa.Integer(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('occupancy_percentage', sa.Numeric(5, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('center_id', 'date', name='uq_center_load_center_date'),
    )
    op.create_index('ix_center_load_center_id', 'center_load', ['center_id'])

    op.create_table(
        'demand_forecast',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('center_id', sa.String(36), sa.ForeignKey('centers.id', ondelete='CASCADE'), nullable=True),
        sa.Column('forecast_date', sa.Date(), nullable=False),
        sa.Column('predicted_demand', sa.Integer(), nullable=False),
        sa.Column('actual_demand', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('center_id', 'forecast_date', name='uq_demand_forecast_center_date'),
    )
    op.create_index('ix_demand_forecast_center_id', 'demand_forecast', ['center_id'])
    op.create_index('ix_demand_forecast_forecast_date', 'demand_forecast', ['forecast_date'])

    op.create_table(
        'session_logs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('resource_type', sa.String(50), nullable=True),
        sa.Column('resource_id', sa.String(255), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=True),
        sa.Column('status_code', sa.Integer(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_session_logs_user_action', 'session_logs', ['user_id', 'action'])
    op.create_index('ix_session_logs_created_at', 'session_logs', ['created_at'])


def downgrade():
    for table in [
        'session_logs', 'demand_forecast', 'center_load', 'fraud_logs', 'update_history',
        'documents', 'appointments', 'time_slots', 'update_types', 'centers',
        'otp_verification', 'aadhaar_records', 'users',
    ]:
        op.drop_table(table)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
