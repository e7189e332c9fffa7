"""
FoodOil IQ - End-to-End Pipeline Demo

This script demonstrates the full data flow:
1. Per-parameter Classification
2. Score Aggregation
3. Prediction (seeded simulation)
4. Batch Test Run + Alerts
5. Report Generation (PDF + Excel)
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timezone

print('='*60)
print('FOODOIL IQ - END-TO-END PIPELINE DEMO')
print('='*60)

# Step 1: Classification
print('\n[1] PER-PARAMETER CLASSIFICATION')
from oiliq.rules import classify, resolve_limits

limits = resolve_limits('fssai')
for name, value in [('ffa', 0.15), ('tpc', 22.0), ('pv', 11.0)]:
    status = classify(value, getattr(limits, name))
    print(f'   - {name.upper()}: {value} vs {getattr(limits, name)} -> {status.value}')

# Step 2: Aggregation
print('\n[2] SCORE AGGREGATION')
from oiliq.rules import aggregate, generate_recommendations

result = aggregate(0.18, 15.0, 5.0, limits, confidence=92.5)
print(f'   [OK] Score: {result.score}/100 ({result.classification.value})')
for rec in generate_recommendations(result, limits):
    print(f'   - {rec}')

# Step 3: Prediction
print('\n[3] PREDICTION (seeded simulation)')
from oiliq.prediction import SimulatedPredictor, simulate_sensor_capture

predictor = SimulatedPredictor(limits=limits, seed=42)
prediction = predictor.predict(simulate_sensor_capture('DEMO-SAMPLE'))
print(f'   [OK] FFA={prediction.ffa} TPC={prediction.tpc} PV={prediction.pv}')
print(f'   - Score: {prediction.score} ({prediction.classification.value}), '
      f'model {prediction.model_version}')

# Step 4: Test run
print('\n[4] BATCH TEST RUN')
from oiliq.store import InMemoryBatchRepository, InMemoryAlertRepository
from oiliq.api.services import run_oil_test, build_report_data

batch_repo = InMemoryBatchRepository(seed_demo=True)
alert_repo = InMemoryAlertRepository()
batch = batch_repo.create_batch('STATION-A1', 'Refined Sunflower Oil')

run = None
for _ in range(3):
    run = run_oil_test(batch.id, batch_repo, alert_repo, predictor, operator_id='demo-operator')
    print(f'   - {run.record.id}: score {run.record.score} ({run.record.classification.value})')

print(f'   [OK] Batch {run.batch.id} tested {run.batch.tests_count}x, '
      f'alerts raised: {alert_repo.unacknowledged_count()}')

# Step 5: Reports
print('\n[5] REPORT GENERATION')
from oiliq.reports import generate_pdf_report, generate_filename, generate_history_excel

output_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'output')
os.makedirs(output_dir, exist_ok=True)

generated_at = datetime.now(timezone.utc)
report_data = build_report_data(run.record, run.batch, limits, company_name='Demo Kitchens Ltd')
pdf_bytes = generate_pdf_report(report_data, generated_at=generated_at)
pdf_path = os.path.join(output_dir, generate_filename(run.batch.id, generated_at))
with open(pdf_path, 'wb') as f:
    f.write(pdf_bytes)
print(f'   [OK] PDF: {pdf_path} ({len(pdf_bytes)} bytes)')

xlsx_bytes = generate_history_excel(run.batch, batch_repo.list_test_records(run.batch.id))
xlsx_path = os.path.join(output_dir, f'FoodOilIQ_History_{run.batch.id}.xlsx')
with open(xlsx_path, 'wb') as f:
    f.write(xlsx_bytes)
print(f'   [OK] Excel: {xlsx_path} ({len(xlsx_bytes)} bytes)')

print('\n' + '='*60)
print('DEMO COMPLETE')
print('='*60)
