# utils/charts.py

import io

import matplotlib

matplotlib.use('Agg')

import matplotlib.pyplot as plt  # noqa: E402

from utils.formatting import format_short_date  # noqa: E402


def _series(metrics, field):
    return [float('nan') if m.get(field) is None else m[field] for m in metrics]


def render_metrics_chart(metrics):
    """Weight and body-fat evolution as PNG bytes"""
    labels = [format_short_date(m.get('metric_date')) for m in metrics]
    positions = list(range(len(metrics)))

    fig, ax = plt.subplots(figsize=(8, 4))
    try:
        ax.plot(positions, _series(metrics, 'weight'), marker='o', color='#16a34a', label='Peso (kg)')
        ax.plot(positions, _series(metrics, 'body_fat_percentage'), marker='o', color='#2563eb',
                label='Gordura (%)')
        ax.set_xticks(positions)
        ax.set_xticklabels(labels)
        ax.grid(True, linestyle='--', alpha=0.4)
        ax.legend()
        fig.tight_layout()

        buffer = io.BytesIO()
        fig.savefig(buffer, format='png')
        return buffer.getvalue()
    finally:
        plt.close(fig)
