# sentiprep/model.py
import torch
import torch.nn as nn

from .config import HIDDEN_SIZE


class SentimentLSTM(nn.Module):
    def __init__(self, input_size: int = 300, hidden_size: int = HIDDEN_SIZE, num_classes: int = 2, dropout: float = 0.0):
        super().__init__()
        self.input_size = input_size
        self.lstm = nn.LSTM(input_size, hidden_size, batch_first=True)
        self.dropout = nn.Dropout(dropout)
        self.fc = nn.Linear(hidden_size, num_classes)

    def forward(self, x, mask=None):
        out, _ = self.lstm(x)  # [B, T, H]
        if mask is None:
            last = out[:, -1]
        else:
            # output at each sequence's last real step
            lengths = mask.sum(dim=1).long().clamp(min=1)
            idx = (lengths - 1).view(-1, 1, 1).expand(-1, 1, out.size(2))
            last = out.gather(1, idx).squeeze(1)
        return self.fc(self.dropout(last))


def build_model(input_size: int, num_classes: int = 2, hidden_size: int = HIDDEN_SIZE, dropout: float = 0.0):
    return SentimentLSTM(input_size=input_size, hidden_size=hidden_size, num_classes=num_classes, dropout=dropout)
